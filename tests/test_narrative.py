import pytest

from src.utils.models import RespiratoryDisease, SmokingStatus
from src.utils.narrative import (
    BASELINE_RECOMMENDATION,
    HIGH_RISK_SUMMARY,
    SUMMARY_BANDS,
    build_narrative,
    recommend,
    risk_factors,
    summarize,
)


@pytest.mark.parametrize(
    "score, prefix",
    [
        (100, "Optimal"),
        (86, "Optimal"),
        (85, "Sub-optimal"),
        (71, "Sub-optimal"),
        (70, "Compromised"),
        (51, "Compromised"),
        (50, "High Risk"),
        (5, "High Risk"),
    ],
)
def test_summary_bands(score, prefix):
    assert summarize(score).startswith(prefix)


def test_every_score_maps_to_exactly_one_known_summary():
    known = {summary for _, summary in SUMMARY_BANDS} | {HIGH_RISK_SUMMARY}
    seen = {summarize(score) for score in range(5, 101)}
    assert seen == known


def test_baseline_recommendation_is_always_first(make_health, make_aqi):
    assert recommend(make_health(), make_aqi(20)) == (BASELINE_RECOMMENDATION,)


def test_recommendations_follow_trigger_order(make_health, make_aqi):
    health = make_health(
        smoking_status=SmokingStatus.HEAVY,
        systolic_bp=145,
        sugar_level=40,
        has_respiratory_problem=True,
    )
    tips = recommend(health, make_aqi(120))
    assert tips[0] == BASELINE_RECOMMENDATION
    assert len(tips) == 6
    assert "cessation" in tips[1]
    assert tips[2].startswith("Hypertension detected")
    assert tips[3].startswith("High/Low sugar")
    assert "respiratory maintenance" in tips[4]
    assert "air quality is poor" in tips[5]
    assert len(set(tips)) == len(tips)


def test_stage1_bp_and_mild_sugar_add_no_recommendation(make_health, make_aqi):
    health = make_health(systolic_bp=135, sugar_level=150)
    assert recommend(health, make_aqi(90)) == (BASELINE_RECOMMENDATION,)


def test_no_risk_factor_when_nothing_crosses_a_threshold(make_health, make_aqi):
    health = make_health(smoking_status=SmokingStatus.LIGHT, systolic_bp=135, diastolic_bp=85)
    assert risk_factors(health, make_aqi(100)) == ()


def test_mild_sugar_tags_glycemic_stress(make_health, make_aqi):
    assert risk_factors(make_health(sugar_level=65), make_aqi(20)) == ("Mild Glycemic Stress",)


def test_disease_tag_names_first_selected_disease(make_health, make_aqi):
    health = make_health(
        has_respiratory_problem=True,
        selected_diseases=(RespiratoryDisease.SLEEP_APNEA, RespiratoryDisease.ASTHMA),
    )
    assert risk_factors(health, make_aqi(20)) == ("Active Sleep Apnea Management",)


def test_respiratory_flag_alone_emits_no_disease_tag(make_health, make_aqi):
    health = make_health(has_respiratory_problem=True)
    assert risk_factors(health, make_aqi(20)) == ()
    assert "Stay consistent with prescribed respiratory maintenance therapy." in recommend(health, make_aqi(20))


def test_aqi_exactly_100_is_not_poor_air(make_health, make_aqi):
    assert "High Particulate Matter Exposure" not in risk_factors(make_health(), make_aqi(100))
    assert "High Particulate Matter Exposure" in risk_factors(make_health(), make_aqi(101))


def test_build_narrative_bundles_all_three(make_health, make_aqi):
    summary, tips, tags = build_narrative(90, make_health(), make_aqi(20))
    assert summary == summarize(90)
    assert tips == (BASELINE_RECOMMENDATION,)
    assert tags == ()
