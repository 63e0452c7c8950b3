"""
Test Suite for UI Formatting Helpers
"""
from types import SimpleNamespace

from ui.formatting import (
    error_message,
    full_time_salary,
    next_progress,
    progress_message,
    summarize_education,
    summarize_experience
)


class TestExperienceSummary:
    """Tests for the work experience list on team cards."""

    def test_short_history(self):
        candidate = {"work_experiences": [{"roleName": "Dev", "company": "A"}]}
        assert summarize_experience(candidate) == ["Dev at A"]

    def test_long_history_truncated(self):
        candidate = {"work_experiences": [
            {"roleName": f"Role {i}", "company": f"Co {i}"} for i in range(5)
        ]}
        lines = summarize_experience(candidate)
        assert lines[:3] == ["Role 0 at Co 0", "Role 1 at Co 1", "Role 2 at Co 2"]
        assert lines[3] == "+2 more positions"

    def test_no_history(self):
        assert summarize_experience({}) == []


class TestProfileFields:
    """Tests for education and salary display."""

    def test_education_uses_original_school(self):
        candidate = {"education": {
            "highest_level": "Master's Degree",
            "degrees": [{"subject": "Physics", "school": "MIT", "originalSchool": "Massachusetts Institute of Technology"}]
        }}
        assert summarize_education(candidate) == (
            "Master's Degree in Physics (Massachusetts Institute of Technology)"
        )

    def test_education_without_degrees(self):
        assert summarize_education({"education": {"highest_level": "High School"}}) == "High School"

    def test_salary(self):
        assert full_time_salary({"annual_salary_expectation": {"full-time": "$90000"}}) == "$90000"
        assert full_time_salary({"annual_salary_expectation": {"part-time": "$40000"}}) == "N/A"


class TestProgressAndErrors:
    """Tests for progress text and backend error extraction."""

    def test_progress_stages(self):
        assert progress_message(10) == "Analyzing job requirements..."
        assert progress_message(40) == "Finding matching candidates..."
        assert progress_message(70) == "Selecting diverse team..."
        assert progress_message(100) == "Finalizing results..."

    def test_waiting_progress_reaches_every_stage(self):
        """Ticks climb by ten and hold at ninety until the reply arrives."""
        value, messages = 10, []
        for _ in range(10):
            value = next_progress(value)
            messages.append(progress_message(value))

        assert value == 90
        assert "Selecting diverse team..." in messages
        assert next_progress(90) == 90

    def test_error_detail(self):
        response = SimpleNamespace(json=lambda: {"detail": "No matching candidates found"})
        assert error_message(response) == "No matching candidates found"

    def test_error_without_json(self):
        def bad_json():
            raise ValueError("not json")

        assert error_message(SimpleNamespace(json=bad_json)) == "Failed to match candidates"
