"""
Tests for the pure display helpers in views.py.
"""

from __future__ import annotations

import unittest

from crewtrack.const import DEFAULT_STATUS_COLOR, STATUS_COLORS
from crewtrack.views import (
    convert_crew_to_map_data,
    format_duration,
    get_distance_km,
    get_status_color,
)

from .test_common import make_crew


class TestDistance(unittest.TestCase):

    def test_identical_points_are_zero(self):
        self.assertEqual(get_distance_km(14.5995, 120.9842, 14.5995, 120.9842), 0)

    def test_symmetric(self):
        a = (14.5995, 120.9842)
        b = (10.3157, 123.8854)
        self.assertAlmostEqual(get_distance_km(*a, *b), get_distance_km(*b, *a), places=9)

    def test_known_distance(self):
        # Manila → Cebu City is roughly 570 km great-circle
        distance = get_distance_km(14.5995, 120.9842, 10.3157, 123.8854)
        self.assertGreater(distance, 550)
        self.assertLess(distance, 590)

    def test_one_degree_of_latitude(self):
        self.assertAlmostEqual(get_distance_km(0, 0, 1, 0), 111.19, places=1)


class TestFormatDuration(unittest.TestCase):

    def test_zero(self):
        self.assertEqual(format_duration(0), "0m")

    def test_minutes_only(self):
        self.assertEqual(format_duration(45), "45m")

    def test_hours_and_minutes(self):
        self.assertEqual(format_duration(90), "1h 30m")

    def test_whole_hours(self):
        self.assertEqual(format_duration(120), "2h")

    def test_exactly_one_hour(self):
        self.assertEqual(format_duration(60), "1h")


class TestStatusColor(unittest.TestCase):

    def test_known_statuses(self):
        self.assertEqual(get_status_color("online"), "#10B981")
        self.assertEqual(get_status_color("busy"), "#F59E0B")
        self.assertEqual(get_status_color("available"), "#3B82F6")
        self.assertEqual(get_status_color("break"), "#8B5CF6")
        self.assertEqual(get_status_color("emergency"), "#EF4444")
        self.assertEqual(get_status_color("offline"), "#6B7280")

    def test_unknown_status_gets_default(self):
        self.assertEqual(get_status_color("on_mars"), DEFAULT_STATUS_COLOR)

    def test_every_status_has_a_colour(self):
        for status in ("online", "offline", "busy", "available", "break", "emergency"):
            self.assertIn(status, STATUS_COLORS)


class TestConvertCrewToMapData(unittest.TestCase):

    def test_crew_without_job(self):
        crew = make_crew(7, crew_group_id=3, group_name="South")
        [marker] = convert_crew_to_map_data([crew])

        self.assertEqual(marker.id, "crew-7")
        self.assertEqual(marker.group_id, "group-3")
        self.assertEqual(marker.group_name, "South")
        self.assertIsNone(marker.current_job)
        self.assertEqual(marker.location.latitude, crew.latitude)
        self.assertEqual(marker.location.longitude, crew.longitude)
        self.assertEqual(marker.location.timestamp, crew.last_update)
        self.assertEqual(marker.last_active, crew.last_update)
        self.assertEqual(marker.rating, 4.5)
        self.assertEqual(marker.completed_jobs, 0)
        self.assertEqual(marker.color, "#3B82F6")

    def test_crew_with_job_flattens_job_fields(self):
        crew = make_crew(
            1,
            status="busy",
            current_job_id=55,
            job_number="JOB-0055",
            job_address="Bonifacio High Street",
            service_category="premium",
            job_progress="62.5",
        )
        [marker] = convert_crew_to_map_data([crew])
        job = marker.current_job

        self.assertEqual(job.id, 55)
        self.assertEqual(job.customer, "Job JOB-0055")
        self.assertEqual(job.service_type, "premium")
        self.assertEqual(job.address, "Bonifacio High Street")
        self.assertEqual(job.progress, 62.5)
        self.assertEqual(job.start_time, crew.status_since)

    def test_job_defaults_when_source_lacks_data(self):
        crew = make_crew(1, current_job_id=9, job_number="JOB-9", address="Crew address")
        [marker] = convert_crew_to_map_data([crew])
        job = marker.current_job

        self.assertEqual(job.vehicle_type, "car")
        self.assertEqual(job.wash_type, "full")
        self.assertEqual(job.service_type, "basic")
        self.assertEqual(job.estimated_duration, 60)
        self.assertEqual(job.progress, 0)
        # Falls back to the crew's own address
        self.assertEqual(job.address, "Crew address")

    def test_preserves_order(self):
        markers = convert_crew_to_map_data([make_crew(3), make_crew(1), make_crew(2)])
        self.assertEqual([m.id for m in markers], ["crew-3", "crew-1", "crew-2"])

    def test_empty_list(self):
        self.assertEqual(convert_crew_to_map_data([]), [])
