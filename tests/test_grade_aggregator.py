import math
import unittest

from services.grade_aggregator import (
    ACHIEVABLE,
    ACHIEVED,
    UNACHIEVABLE,
    AssessmentComponent,
    AssessmentScore,
    GradeGroup,
    GradedItem,
    InvalidWeightSumError,
    NoRemainingCapacityError,
    classify_requirement,
    cumulative_cgpa,
    projected_percentage,
    required_average_for_target,
    required_component_score,
    semester_sgpa,
    validate_weight_sum,
    weighted_average,
)


class WeightedAverageTests(unittest.TestCase):
    def test_weighted_by_credit(self):
        items = [GradedItem(4, 8), GradedItem(3, 9)]
        self.assertAlmostEqual(weighted_average(items), (4 * 8 + 3 * 9) / 7)

    def test_empty_is_zero_not_nan(self):
        result = weighted_average([])
        self.assertEqual(result, 0.0)
        self.assertFalse(math.isnan(result))

    def test_only_pending_items_is_zero(self):
        self.assertEqual(weighted_average([GradedItem(4, None), GradedItem(3)]), 0.0)

    def test_no_rounding(self):
        items = [GradedItem(3, 9), GradedItem(3, 8), GradedItem(3, 8)]
        self.assertAlmostEqual(weighted_average(items), 25 / 3, places=12)
        self.assertNotEqual(weighted_average(items), round(25 / 3, 2))

    def test_accepts_generator(self):
        self.assertAlmostEqual(weighted_average(GradedItem(2, gp) for gp in (6, 10)), 8.0)


class SemesterSgpaTests(unittest.TestCase):
    def test_pending_items_excluded(self):
        group = GradeGroup(items=[GradedItem(4, 8), GradedItem(3, None)])
        result = semester_sgpa(group)
        self.assertAlmostEqual(result.sgpa, 8.0)
        self.assertEqual(result.total_credits, 4)
        self.assertEqual(result.graded_count, 1)
        self.assertEqual(result.total_count, 2)

    def test_group_without_grades(self):
        result = semester_sgpa(GradeGroup(items=[GradedItem(4), GradedItem(2)]))
        self.assertEqual(result.sgpa, 0)
        self.assertEqual(result.graded_count, 0)
        self.assertEqual(result.total_count, 2)
        self.assertEqual(result.total_credits, 0)

    def test_empty_group(self):
        result = semester_sgpa(GradeGroup())
        self.assertEqual((result.sgpa, result.graded_count, result.total_count), (0.0, 0, 0))

    def test_does_not_mutate_items(self):
        items = [GradedItem(4, 8), GradedItem(3, None)]
        semester_sgpa(GradeGroup(items=items))
        self.assertEqual(items, [GradedItem(4, 8), GradedItem(3, None)])


class CumulativeCgpaTests(unittest.TestCase):
    def setUp(self):
        self.group_a = GradeGroup(items=[GradedItem(4, 8), GradedItem(4, 9)])
        self.group_b = GradeGroup(items=[GradedItem(5, 10), GradedItem(2, 8), GradedItem(3, None)])

    def test_weighted_over_all_items(self):
        result = cumulative_cgpa([self.group_a, self.group_b])
        self.assertAlmostEqual(result.cgpa, (32 + 36 + 50 + 16) / 15)
        self.assertEqual(result.total_credits, 15)

    def test_order_independent(self):
        forward = cumulative_cgpa([self.group_a, self.group_b])
        backward = cumulative_cgpa([self.group_b, self.group_a])
        self.assertAlmostEqual(forward.cgpa, backward.cgpa, places=12)
        self.assertEqual(forward.total_credits, backward.total_credits)

    def test_not_an_average_of_sgpas(self):
        small = GradeGroup(items=[GradedItem(1, 4)])
        large = GradeGroup(items=[GradedItem(9, 10)])
        self.assertAlmostEqual(cumulative_cgpa([small, large]).cgpa, 9.4)

    def test_no_groups(self):
        result = cumulative_cgpa([])
        self.assertEqual((result.cgpa, result.total_credits), (0.0, 0))


class RequiredAverageTests(unittest.TestCase):
    completed = [GradedItem(20, 8)]

    def test_achievable_at_scale_max(self):
        required = required_average_for_target(9, self.completed, 20)
        self.assertAlmostEqual(required, 10.0)
        self.assertEqual(classify_requirement(required, 10), ACHIEVABLE)

    def test_above_scale_is_returned_unclamped(self):
        required = required_average_for_target(9.5, self.completed, 20)
        self.assertAlmostEqual(required, 11.0)
        self.assertEqual(classify_requirement(required, 10), UNACHIEVABLE)

    def test_negative_when_target_already_exceeded(self):
        required = required_average_for_target(4, [GradedItem(40, 9)], 4)
        self.assertLess(required, 0)
        self.assertEqual(classify_requirement(required, 10), ACHIEVED)

    def test_no_remaining_capacity(self):
        with self.assertRaises(NoRemainingCapacityError):
            required_average_for_target(9, self.completed, 0)
        with self.assertRaises(NoRemainingCapacityError):
            required_average_for_target(9, self.completed, -5)

    def test_pending_completed_items_ignored(self):
        with_pending = self.completed + [GradedItem(10, None)]
        self.assertAlmostEqual(required_average_for_target(9, with_pending, 20), 10.0)

    def test_nothing_completed(self):
        self.assertAlmostEqual(required_average_for_target(7.5, [], 24), 7.5)


class RequiredComponentScoreTests(unittest.TestCase):
    def test_single_pending_component(self):
        components = [AssessmentComponent("A", 50, 100, ref=1), AssessmentComponent("B", 50, 50, ref=2)]
        scores = [AssessmentScore(component_ref=2, score_obtained=40, max_score=50)]

        projection = required_component_score(85, components, scores)

        self.assertAlmostEqual(projection.completed_weighted, 40)
        self.assertAlmostEqual(projection.remaining_weight, 50)
        self.assertAlmostEqual(projection.required_percent_remaining, 90)
        self.assertEqual(len(projection.per_component), 1)
        self.assertEqual(projection.per_component[0].component.name, "A")
        self.assertAlmostEqual(projection.per_component[0].recommended_score, 90)

    def test_uniform_distribution_over_pending(self):
        components = [
            AssessmentComponent("Quiz", 10, 20, ref=1),
            AssessmentComponent("Mid", 30, 50, ref=2),
            AssessmentComponent("End", 40, 100, ref=3),
            AssessmentComponent("Lab", 20, 25, ref=4),
        ]
        # Lab done at 80% -> 16 weighted points, 80 weight pending
        scores = [AssessmentScore(component_ref=4, score_obtained=20, max_score=25)]

        projection = required_component_score(80, components, scores)

        self.assertAlmostEqual(projection.required_percent_remaining, 80)
        self.assertEqual([r.component.name for r in projection.per_component], ["Quiz", "Mid", "End"])
        for rec in projection.per_component:
            self.assertAlmostEqual(rec.recommended_percent, 80)
        self.assertEqual(
            [round(r.recommended_score, 6) for r in projection.per_component],
            [16.0, 40.0, 80.0],
        )

    def test_components_matched_by_name_without_ref(self):
        components = [AssessmentComponent("Mid", 40, 40), AssessmentComponent("End", 60, 60)]
        scores = [AssessmentScore(component_ref="Mid", score_obtained=20, max_score=40)]
        projection = required_component_score(50, components, scores)
        self.assertAlmostEqual(projection.required_percent_remaining, 50)

    def test_all_scored_has_no_remaining_capacity(self):
        components = [AssessmentComponent("Only", 100, 10, ref=1)]
        scores = [AssessmentScore(component_ref=1, score_obtained=7, max_score=10)]
        with self.assertRaises(NoRemainingCapacityError):
            required_component_score(90, components, scores)

    def test_required_can_exceed_100(self):
        components = [AssessmentComponent("A", 50, 10, ref=1), AssessmentComponent("B", 50, 10, ref=2)]
        scores = [AssessmentScore(component_ref=1, score_obtained=2, max_score=10)]
        projection = required_component_score(90, components, scores)
        self.assertAlmostEqual(projection.required_percent_remaining, 160)


class ProjectedPercentageTests(unittest.TestCase):
    components = [AssessmentComponent("Mid", 40, 50, ref=1), AssessmentComponent("End", 60, 100, ref=2)]

    def test_projects_current_average(self):
        scores = [AssessmentScore(component_ref=1, score_obtained=35, max_score=50)]
        self.assertAlmostEqual(projected_percentage(self.components, scores), 70)

    def test_all_components_scored(self):
        scores = [
            AssessmentScore(component_ref=1, score_obtained=50, max_score=50),
            AssessmentScore(component_ref=2, score_obtained=50, max_score=100),
        ]
        self.assertAlmostEqual(projected_percentage(self.components, scores), 70)

    def test_no_scores(self):
        self.assertEqual(projected_percentage(self.components, []), 0.0)


class WeightSumTests(unittest.TestCase):
    def test_accepts_within_tolerance(self):
        self.assertAlmostEqual(validate_weight_sum([33.33, 33.33, 33.34]), 100)
        validate_weight_sum([50, 49.995])

    def test_rejects_off_total(self):
        with self.assertRaises(InvalidWeightSumError) as ctx:
            validate_weight_sum([40, 40])
        self.assertIn("80", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
