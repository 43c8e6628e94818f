"""Unit tests for bio_age_service module."""

from datetime import UTC, datetime, timedelta

import pytest

from habitforge.domain.completion import CompletionRecord
from habitforge.domain.metrics import AlcoholFrequency, BioAgeGrade, FactorStatus, SmokingStatus
from habitforge.models.service_models import BioAgeInput
from habitforge.services import bio_age_service


def _input(score: float = 50, **overrides) -> BioAgeInput:
    values = {
        "chronological_age": 35,
        "exercise_score": score,
        "sleep_score": score,
        "nutrition_score": score,
        "stress_score": score,
        "consistency_score": score,
        "smoking_status": SmokingStatus.NEVER,
        "alcohol_frequency": AlcoholFrequency.OCCASIONAL,
    }
    values.update(overrides)
    return BioAgeInput(**values)


@pytest.mark.unit
class TestCalculateBioAge:
    """Tests for the bio-age formula."""

    def test_neutral_inputs_match_chronological_age(self):
        """Verify neutral inputs match chronological age."""
        result = bio_age_service.calculate_bio_age(_input())

        assert result.biological_age == pytest.approx(35)
        assert result.age_difference == pytest.approx(0)
        assert result.grade == BioAgeGrade.B
        assert result.percentile == 50

    def test_best_case(self):
        """Verify best case."""
        result = bio_age_service.calculate_bio_age(
            _input(100, stress_score=0, alcohol_frequency=AlcoholFrequency.NEVER)
        )

        assert result.age_difference == pytest.approx(-11.5)
        assert result.biological_age == pytest.approx(23.5)
        assert result.grade == BioAgeGrade.A_PLUS
        assert result.percentile == 99

    def test_worst_case(self):
        """Verify worst case."""
        result = bio_age_service.calculate_bio_age(
            _input(
                0,
                stress_score=100,
                smoking_status=SmokingStatus.CURRENT,
                alcohol_frequency=AlcoholFrequency.HEAVY,
            )
        )

        assert result.age_difference == pytest.approx(19)
        assert result.grade == BioAgeGrade.F
        assert result.percentile == 1

    @pytest.mark.parametrize(
        ("smoking", "alcohol", "expected_delta"),
        [
            (SmokingStatus.FORMER, AlcoholFrequency.OCCASIONAL, 2.0),
            (SmokingStatus.CURRENT, AlcoholFrequency.OCCASIONAL, 5.0),
            (SmokingStatus.NEVER, AlcoholFrequency.NEVER, -0.5),
            (SmokingStatus.NEVER, AlcoholFrequency.MODERATE, 1.0),
            (SmokingStatus.NEVER, AlcoholFrequency.HEAVY, 3.0),
        ],
    )
    def test_lifestyle_offsets(self, smoking, alcohol, expected_delta):
        """Verify lifestyle offsets."""
        result = bio_age_service.calculate_bio_age(_input(smoking_status=smoking, alcohol_frequency=alcohol))

        assert result.age_difference == pytest.approx(expected_delta)

    def test_stress_is_inverted(self):
        """Low stress lowers bio-age; high stress raises it."""
        calm = bio_age_service.calculate_bio_age(_input(stress_score=0))
        stressed = bio_age_service.calculate_bio_age(_input(stress_score=100))

        assert calm.age_difference == pytest.approx(-1.5)
        assert stressed.age_difference == pytest.approx(1.5)

    def test_percentile_rounds_half_up(self):
        """Verify percentile rounds half up."""
        # delta -0.0625 puts the raw percentile at exactly 50.5
        result = bio_age_service.calculate_bio_age(_input(consistency_score=51.5625))

        assert result.age_difference == pytest.approx(-0.0625)
        assert result.percentile == 51

    def test_factor_breakdown(self):
        """Verify factor breakdown."""
        result = bio_age_service.calculate_bio_age(_input(90, stress_score=30))

        names = [factor.name for factor in result.factors]
        assert names == ["Exercise", "Sleep", "Nutrition", "Stress", "Consistency", "Lifestyle"]

        stress = result.factors[3]
        assert stress.score == 70
        assert stress.status == FactorStatus.GOOD

        lifestyle = result.factors[5]
        assert lifestyle.score == 100
        assert lifestyle.status == FactorStatus.EXCELLENT
        assert lifestyle.impact == 0

    def test_lifestyle_factor_for_smoker(self):
        """Verify lifestyle factor for smoker."""
        result = bio_age_service.calculate_bio_age(
            _input(smoking_status=SmokingStatus.CURRENT, alcohol_frequency=AlcoholFrequency.HEAVY)
        )

        lifestyle = result.factors[5]
        assert lifestyle.score == 20
        assert lifestyle.status == FactorStatus.POOR
        assert lifestyle.impact == 8


@pytest.mark.unit
class TestGradesAndMessages:
    @pytest.mark.parametrize(
        ("delta", "grade"),
        [
            (-6, BioAgeGrade.A_PLUS),
            (-5, BioAgeGrade.A_PLUS),
            (-3, BioAgeGrade.A),
            (0, BioAgeGrade.B),
            (0.5, BioAgeGrade.C),
            (3, BioAgeGrade.C),
            (5, BioAgeGrade.D),
            (5.1, BioAgeGrade.F),
        ],
    )
    def test_grade_bands(self, delta, grade):
        """Verify grade bands."""
        assert bio_age_service.grade_for_delta(delta) == grade

    @pytest.mark.parametrize(
        ("score", "status"),
        [
            (80, FactorStatus.EXCELLENT),
            (79.9, FactorStatus.GOOD),
            (60, FactorStatus.GOOD),
            (40, FactorStatus.FAIR),
            (39, FactorStatus.POOR),
        ],
    )
    def test_factor_status_bands(self, score, status):
        """Verify factor status bands."""
        assert bio_age_service.factor_status(score) == status

    def test_messages(self):
        """Verify messages."""
        best = bio_age_service.calculate_bio_age(_input(100, stress_score=0))
        neutral = bio_age_service.calculate_bio_age(_input())
        worst = bio_age_service.calculate_bio_age(_input(0, stress_score=100))

        assert bio_age_service.get_bio_age_message(best).startswith("Exceptional!")
        assert bio_age_service.get_bio_age_message(neutral).startswith("Great job!")
        assert bio_age_service.get_bio_age_message(worst).startswith("Let's work on this together.")

    def test_xp_to_years_saved(self):
        """Verify xp to years saved."""
        assert bio_age_service.xp_to_years_saved(0) == 0
        assert bio_age_service.xp_to_years_saved(2500) == pytest.approx(0.25)


@pytest.mark.unit
class TestFactorsFromCompletions:
    """Tests for deriving sub-scores from completion history."""

    def test_counts_only_the_last_seven_days(self, day):
        """Verify counts only the last seven days."""
        completions = [
            CompletionRecord(task_id="exercise-cardio", date=day, xp_awarded=25),
            CompletionRecord(task_id="exercise-strength", date=day - timedelta(days=6), xp_awarded=25),
            CompletionRecord(task_id="exercise-cardio", date=day - timedelta(days=7), xp_awarded=25),
            CompletionRecord(task_id="sleep-early", date=day, xp_awarded=20),
            CompletionRecord(task_id="wind-down", date=day, xp_awarded=15),
            CompletionRecord(task_id="supplements-am", date=day, xp_awarded=10),
            CompletionRecord(task_id="super-veggie", date=day, xp_awarded=20),
            CompletionRecord(task_id="gratitude", date=day, xp_awarded=10),
        ]

        factors = bio_age_service.calculate_factors_from_completions(
            completions, current_streak=4, days_since_start=10, today=day, catalog_size=13
        )

        assert factors.exercise_score == pytest.approx(2 / 14 * 100)
        assert factors.sleep_score == pytest.approx(2 / 14 * 100)
        assert factors.nutrition_score == pytest.approx(2 / 28 * 100)
        assert factors.stress_score == 80
        assert factors.consistency_score == pytest.approx(4 / 7 * 50 + 8 / 130 * 50)

    def test_future_completions_ignored(self, day):
        """Verify future completions ignored."""
        completions = [CompletionRecord(task_id="exercise-cardio", date=day + timedelta(days=1), xp_awarded=25)]

        factors = bio_age_service.calculate_factors_from_completions(
            completions, current_streak=0, days_since_start=1, today=day, catalog_size=13
        )

        assert factors.exercise_score == 0

    def test_scores_are_capped(self, day):
        """Verify scores are capped."""
        completions = [
            CompletionRecord(task_id=f"exercise-{n}", date=day - timedelta(days=n % 7), xp_awarded=25)
            for n in range(20)
        ]

        factors = bio_age_service.calculate_factors_from_completions(
            completions, current_streak=30, days_since_start=1, today=day, catalog_size=13
        )

        assert factors.exercise_score == 100
        assert factors.stress_score == 0
        assert factors.consistency_score == 100

    def test_empty_catalog_guarded(self, day):
        """Verify empty catalog guarded."""
        factors = bio_age_service.calculate_factors_from_completions(
            [], current_streak=0, days_since_start=1, today=day, catalog_size=0
        )

        assert factors.consistency_score == 0
        assert factors.stress_score == 100

    def test_days_since_start(self):
        """Verify days since start."""
        created = datetime(2025, 3, 1, tzinfo=UTC)

        assert bio_age_service.days_since_start(created, created + timedelta(days=9, hours=12)) == 9
        assert bio_age_service.days_since_start(created, created) == 1
        assert bio_age_service.days_since_start(created, created + timedelta(hours=30)) == 1
