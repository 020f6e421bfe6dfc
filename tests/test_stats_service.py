"""
Tests for dashboard aggregation.
"""
from datetime import date

import pytest

from app.services.stats_service import (
    build_dashboard_report, calculate_kpis, get_company_wise_data, get_department_stats,
    get_mentor_stats, get_monthly_placements, get_package_distribution,
    get_status_distribution, round2,
)


@pytest.fixture
def placed(make_student):
    def _placed(roll, company, package, placed_on=date(2024, 3, 1), **kwargs):
        return make_student(roll, company=company, package=package, placement_date=placed_on, **kwargs)
    return _placed


class TestKPIs:

    def test_scenario(self, scenario_students):
        kpis = calculate_kpis(scenario_students)

        assert kpis.total_students == 3
        assert kpis.total_placed == 1
        assert kpis.total_ineligible == 1
        assert kpis.total_eligible == 1
        assert kpis.higher_studies == 0
        assert kpis.average_package == 10
        assert kpis.top_company == "Acme"
        assert kpis.top_package == 10
        assert kpis.placement_rate == 33.33

    def test_empty(self):
        kpis = calculate_kpis([])
        assert kpis.total_students == 0
        assert kpis.average_package == 0
        assert kpis.top_company == ""
        assert kpis.placement_rate == 0

    def test_statuses_partition(self, make_student, placed):
        students = [
            placed("P1", "Acme", 5),
            placed("P2", "Beta", 7),
            make_student("E1"),
            make_student("I1", ug=4),
            make_student("H1", status="higher_studies"),
            make_student("H2", status="higher_studies"),
        ]
        kpis = calculate_kpis(students)
        assert kpis.total_students == (
            kpis.total_placed + kpis.total_eligible + kpis.total_ineligible + kpis.higher_studies
        )

    def test_average_within_bounds(self, placed):
        packages = [3.5, 4.25, 18, 7.1]
        kpis = calculate_kpis([placed(f"P{i}", "Acme", p) for i, p in enumerate(packages)])
        assert min(packages) <= kpis.average_package <= max(packages)
        assert kpis.average_package == 8.21

    def test_top_company_tie_goes_to_first(self, placed):
        students = [placed("P1", "Beta", 5), placed("P2", "Acme", 6),
                    placed("P3", "Acme", 7), placed("P4", "Beta", 8)]
        assert calculate_kpis(students).top_company == "Beta"


class TestRounding:

    @pytest.mark.parametrize("value,expected", [
        (2.675, 2.68),
        (1.005, 1.01),
        (-1.005, -1.01),
        (33.333333, 33.33),
        (10, 10.0),
    ])
    def test_half_away_from_zero(self, value, expected):
        assert round2(value) == expected

    def test_non_finite_passthrough(self):
        assert round2(float("inf")) == float("inf")


class TestBreakdowns:

    def test_department_stats(self, make_student, placed):
        students = [
            placed("P1", "Acme", 10),
            placed("P2", "Beta", 5, department="Information Technology"),
            make_student("E1"),
            placed("P3", "Gamma", 21),
        ]
        stats = get_department_stats(students)

        assert [s.department for s in stats] == ["Computer Science", "Information Technology"]
        cs = stats[0]
        assert (cs.placed, cs.eligible) == (2, 1)
        assert cs.average_package == 15.5
        assert cs.top_package == 21

    def test_monthly_sorted_and_labelled(self, placed):
        students = [
            placed("P1", "Acme", 10, date(2024, 3, 5)),
            placed("P2", "Acme", 6, date(2023, 12, 1)),
            placed("P3", "Beta", 8, date(2024, 3, 28)),
        ]
        months = get_monthly_placements(students)
        assert [m.month for m in months] == ["Dec 2023", "Mar 2024"]
        assert months[1].placed == 2
        assert months[1].average_package == 9

    def test_company_wise_top_ten_by_count(self, placed):
        students = [placed(f"S{i}", f"Company {i}", 5) for i in range(12)]
        students += [placed("X1", "Company 11", 9), placed("X2", "Company 11", 7)]
        data = get_company_wise_data(students)

        assert len(data) == 10
        assert data[0].name == "Company 11"
        assert data[0].value == 3
        assert data[0].package == 7
        # equal counts keep first-seen order
        assert data[1].name == "Company 0"

    def test_package_distribution(self, placed):
        students = [placed(f"P{i}", "Acme", p) for i, p in enumerate([3, 7, 12, 40, 60])]
        buckets = get_package_distribution(students)
        assert [(b.name, b.value) for b in buckets] == [
            ("0-5 LPA", 1), ("5-10 LPA", 1), ("10-15 LPA", 1),
            ("15-25 LPA", 0), ("25-50 LPA", 1), ("50+ LPA", 1),
        ]

    def test_bucket_edges(self, placed):
        buckets = get_package_distribution([placed("P1", "Acme", 5), placed("P2", "Acme", 50)])
        assert [b.value for b in buckets] == [0, 1, 0, 0, 0, 1]

    def test_status_distribution_labels(self, scenario_students, make_student):
        students = scenario_students + [make_student("H1", status="higher_studies")]
        dist = get_status_distribution(students)
        assert [(d.name, d.value) for d in dist] == [
            ("Eligible", 1), ("Placed", 1), ("Ineligible", 1), ("Higher Studies", 1),
        ]

    def test_mentor_stats(self, make_student, placed, mentor_user, other_mentor):
        students = [
            placed("P1", "Acme", 10, mentor_id=mentor_user.id),
            make_student("E1", mentor_id=mentor_user.id),
            make_student("E2", mentor_id=other_mentor.id, ug=3),
        ]
        stats = get_mentor_stats(students, [mentor_user, other_mentor])

        assert stats[0].mentor_name == mentor_user.name
        assert (stats[0].total_students, stats[0].placed, stats[0].placement_rate) == (2, 1, 50.0)
        assert (stats[1].total_students, stats[1].ineligible) == (1, 1)

    def test_dashboard_report(self, scenario_students):
        report = build_dashboard_report(scenario_students)
        assert report.kpis.total_students == 3
        assert len(report.package_distribution) == 6
        assert report.company_data[0].name == "Acme"
