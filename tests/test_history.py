from datetime import datetime, timezone

from src.utils import memory
from src.utils.memory import archive_analysis, get_user_history
from src.utils.models import RespiratoryDisease, SmokingStatus
from src.utils.nutrition import nutrition_requirements
from src.utils.scoring import analyze_breath_health


def _archive(user_id, health, aqi):
    return archive_analysis(user_id, health, analyze_breath_health(health, aqi), aqi)


def test_archive_stamps_id_and_timestamp(make_health, make_aqi):
    now = datetime(2025, 8, 14, 10, 2, tzinfo=timezone.utc)
    health, aqi = make_health(), make_aqi(40)
    record = archive_analysis("u1", health, analyze_breath_health(health, aqi), aqi, now=now)

    assert record.timestamp == "2025-08-14T10:02:00+00:00"
    assert record.health_data == health
    assert get_user_history("u1") == [record]


def test_history_is_newest_first_and_capped(make_health, make_aqi):
    records = [_archive("u1", make_health(age=20 + i), make_aqi(40)) for i in range(55)]

    history = get_user_history("u1")
    assert len(history) == 50
    assert history[0] == records[-1]
    assert history[-1] == records[5]


def test_history_is_kept_per_user(make_health, make_aqi):
    _archive("u1", make_health(), make_aqi(40))
    assert get_user_history("u2") == []
    memory.clear_history("u1")
    assert get_user_history("u1") == []


# ---------------- Nutrition ----------------
def test_no_history_means_no_requirements():
    assert nutrition_requirements([]) == []


def test_healthy_history_needs_nothing(make_health, make_aqi):
    _archive("u1", make_health(), make_aqi(40))
    assert nutrition_requirements(get_user_history("u1")) == []


def test_every_rule_can_fire(make_health, make_aqi):
    _archive("u1", make_health(
        sugar_level=180,
        systolic_bp=135,
        smoking_status=SmokingStatus.LIGHT,
        has_respiratory_problem=True,
        selected_diseases=(RespiratoryDisease.ASTHMA,),
    ), make_aqi(40))

    nutrients = [requirement.nutrient for requirement in nutrition_requirements(get_user_history("u1"))]
    assert nutrients == ["Magnesium & Fiber", "Vitamin C & E", "Omega-3 Fatty Acids", "Beta-Carotene"]


def test_sugar_rule_uses_history_average(make_health, make_aqi):
    _archive("u1", make_health(sugar_level=100), make_aqi(40))
    _archive("u1", make_health(sugar_level=170), make_aqi(40))
    # average 135 stays under the threshold even though the latest reading is high
    assert nutrition_requirements(get_user_history("u1")) == []


def test_poor_average_air_triggers_antioxidants_for_non_smokers(make_health, make_aqi):
    _archive("u1", make_health(), make_aqi(180))
    _archive("u1", make_health(), make_aqi(60))

    nutrients = [requirement.nutrient for requirement in nutrition_requirements(get_user_history("u1"))]
    assert nutrients == ["Vitamin C & E"]
