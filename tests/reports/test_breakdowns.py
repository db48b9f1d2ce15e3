from src.fellowship_reports.fellowship_reports.core.enums import DecisionType, Gender, MemberRole
from src.fellowship_reports.fellowship_reports.events.model import DecisionRecord
from src.fellowship_reports.fellowship_reports.members.model import Member
from src.fellowship_reports.fellowship_reports.reports import breakdowns


def _m(member_id, gender=Gender.MALE, **kwargs):
    return Member(member_id=member_id, full_name=member_id, role=MemberRole.MEMBER, gender=gender, **kwargs)


def test_frequency_orders_by_count_then_key():
    result = breakdowns.frequency(["b", "a", "c", "c", None, ""])

    assert list(result.items()) == [("c", 2), ("a", 1), ("b", 1)]


def test_course_and_college_have_no_catch_all():
    members = [_m("1", course="BSc CS", college="CoCIS"), _m("2")]

    assert breakdowns.course_breakdown(members) == {"BSc CS": 1}
    assert breakdowns.college_breakdown(members) == {"CoCIS": 1}


def test_year_of_study_labels():
    members = [_m("1", year_of_study=1), _m("2", year_of_study=1), _m("3")]

    assert breakdowns.year_of_study_breakdown(members) == {"Year 1": 2}


def test_family_breakdown_counts_unassigned_members():
    members = [
        _m("1", family_ids=("F1",), family_names=("Alpha",)),
        _m("2", family_ids=("F1", "F3"), family_names=("Alpha", "Gamma")),
        _m("3"),
    ]

    assert breakdowns.family_breakdown(members) == {"Alpha": 2, "Gamma": 1, "No Family": 1}


def test_catch_all_is_zero_when_everyone_is_assigned():
    members = [_m("1", team_ids=("T1",), team_names=("Media",))]

    assert breakdowns.team_breakdown(members) == {"Media": 1, "No Team": 0}


def test_catch_all_absent_without_attendees():
    assert breakdowns.family_breakdown([]) == {}
    assert breakdowns.team_breakdown([]) == {}


def test_gender_breakdown_is_not_seeded():
    assert breakdowns.gender_breakdown([_m("1", gender=Gender.FEMALE)]) == {"FEMALE": 1}


def test_member_type_rules():
    assert breakdowns.member_type(_m("1", tags=("ALUMNI",), course="BSc CS")) == "Alumni"
    assert breakdowns.member_type(_m("2", course="BSc CS")) == "Makerere Students"
    assert breakdowns.member_type(_m("3")) == "Non-Makerere / Other"


def test_decision_breakdown():
    decisions = [
        DecisionRecord("e1", DecisionType.SALVATION, "1"),
        DecisionRecord("e1", DecisionType.SALVATION),
        DecisionRecord("e1", DecisionType.REDEDICATION, "2"),
    ]

    assert breakdowns.decision_breakdown(decisions) == {"SALVATION": 2, "REDEDICATION": 1}


def test_special_tag_stats():
    members = [_m("1", tags=("FINALIST", "CHECK_IN_VOLUNTEER")), _m("2", tags=("ALUMNI",))]

    assert breakdowns.special_tag_stats(members) == {"finalists": 1, "alumni": 1, "volunteers": 1}
