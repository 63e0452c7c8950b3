"""
Streamlit front end for the team matcher

Collects job requirements, asks the API for a diverse team and renders one card per member.
"""

import time
from concurrent.futures import ThreadPoolExecutor

import requests
import streamlit as st

from config import settings
from ui.formatting import (
    error_message,
    full_time_salary,
    next_progress,
    progress_message,
    summarize_education,
    summarize_experience
)

MATCH_ENDPOINT = f"{settings.API_BASE_URL.rstrip('/')}/api/match-candidates"
PROGRESS_INTERVAL = 1.5


def request_team(requirements: str) -> list:
    """Ask the backend for a diverse team; raises RuntimeError with the backend's message"""
    try:
        response = requests.post(MATCH_ENDPOINT, json={"requirements": requirements}, timeout=120)
    except requests.RequestException as e:
        raise RuntimeError(str(e)) from e

    if not response.ok:
        raise RuntimeError(error_message(response))
    return response.json().get('team', [])


def reset_search():
    st.session_state.requirements = ""
    st.session_state.team = []
    st.session_state.error = ""


def render_member(member: dict, index: int):
    candidate = member['candidate']

    with st.container(border=True):
        title = f"### {candidate.get('name', '')}"
        if index == 0:
            title += " :blue-background[Team Lead]"
        st.markdown(title)
        st.caption(f"📍 {candidate.get('location', '')}")

        st.markdown("**💼 Work Experience**")
        for line in summarize_experience(candidate):
            st.markdown(f"- {line}")

        st.markdown("**🎓 Education**")
        st.write(summarize_education(candidate))

        st.markdown("**Skills**")
        st.markdown(" ".join(f"`{skill}`" for skill in candidate.get('skills') or []))

        st.markdown(
            f"💲 {full_time_salary(candidate)} &nbsp;&nbsp; "
            f"🕒 {', '.join(candidate.get('work_availability') or [])}"
        )

        st.markdown("**Why Selected:**")
        for reason in member.get('reasons') or []:
            st.markdown(f"- {reason}")

        st.markdown("**Unique Strengths:**")
        for strength in member.get('unique_strengths') or []:
            st.markdown(f"- {strength}")

        st.markdown("**Team Fit:**")
        st.write(member.get('complements_team', ''))


# --- Streamlit UI ---
st.set_page_config(page_title="Job Candidate Matcher", layout="wide")
st.title("AI-Powered Job Candidate Matcher")

st.session_state.setdefault("requirements", "")
st.session_state.setdefault("team", [])
st.session_state.setdefault("error", "")

if st.session_state.error:
    st.error(f"Error matching candidates: {st.session_state.error}")

st.subheader("Job Requirements")
requirements = st.text_area(
    "Job Requirements",
    key="requirements",
    height=140,
    label_visibility="collapsed",
    placeholder=(
        "Describe the job requirements in detail. Include skills, experience level, "
        "education, team fit, and any other relevant factors."
    )
)

if st.button("Find Diverse Team of 5", type="primary", disabled=not requirements.strip()):
    st.session_state.error = ""
    value = 10
    progress = st.progress(value, text=progress_message(value))
    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(request_team, requirements)
        while not pending.done():
            time.sleep(PROGRESS_INTERVAL)
            value = next_progress(value)
            progress.progress(value, text=progress_message(value))
    try:
        st.session_state.team = pending.result()
        progress.progress(100, text=progress_message(100))
        time.sleep(0.5)
    except RuntimeError as e:
        st.session_state.team = []
        st.session_state.error = str(e)
    progress.empty()
    st.rerun()

team = st.session_state.team
if team:
    st.header(f"Top {len(team)} Diverse Team Members")
    columns = st.columns(3)
    for i, member in enumerate(team):
        with columns[i % 3]:
            render_member(member, i)

    st.markdown("---")
    st.markdown("**Want to try a different job description?**")
    st.button("Start New Search", on_click=reset_search)
