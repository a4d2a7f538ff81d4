from __future__ import annotations

import pandas as pd
import streamlit as st
import altair as alt

from survey_trends.config import get_settings
from survey_trends.db import get_client, get_db
from survey_trends.models import SurveyReport, TrendEntry
from survey_trends.report import build_report

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="팀 설문 결과", layout="wide")
st.title("📊 주차별 설문 결과")

ARROWS = {"up": "↑", "down": "↓", "stable": "→"}

# =====================================================
# Report (fetch questions + responses, aggregate once)
# =====================================================
try:
    settings = get_settings()
except RuntimeError as exc:
    st.error(str(exc))
    st.stop()


@st.cache_data(ttl=300)
def load_report() -> dict:
    """Build the report and return it as plain data so Streamlit can cache it."""
    client = get_client(settings.mongo_uri, tls=settings.mongo_tls)
    db = get_db(client, settings.mongo_db)
    report = build_report(
        db, tz=settings.timezone, text_limit=settings.text_response_limit
    )
    return report.model_dump(mode="python")


try:
    report = SurveyReport.model_validate(load_report())
except Exception as exc:  # pragma: no cover - runtime failure handling
    st.error(f"데이터를 불러오는 중 오류가 발생했습니다: {exc}")
    st.stop()


# =====================================================
# Helpers
# =====================================================
def weeks_frame(report: SurveyReport) -> pd.DataFrame:
    """Flatten weekly summaries into one row per (week, question).

    Returns:
        DataFrame with columns `week`, `date`, `count`, `question_id`, `average`.
    """
    rows = [
        {
            "week": w.week,
            "date": pd.Timestamp(w.date),
            "count": w.count,
            "question_id": str(qid),
            "average": avg,
        }
        for w in report.weeks
        for qid, avg in w.per_question_average.items()
    ]
    return pd.DataFrame(rows)


def trend_badge(trend: TrendEntry | None) -> str:
    """Render a trend as e.g. ``↑ +0.50 (+16.7%)``."""
    if trend is None:
        return ""
    sign = "+" if float(trend.change) > 0 else ""
    return f"{ARROWS[trend.direction]} {sign}{trend.change} ({trend.change_percentage})"


# =====================================================
# SECTION 0 — OVERVIEW
# =====================================================
latest = report.latest_week

c1, c2, c3 = st.columns(3)
with c1:
    st.metric("집계 주차 수", len(report.weeks))
with c2:
    st.metric("최근 주차", latest.week if latest else "N/A")
with c3:
    st.metric("최근 주차 응답 수", f"{latest.count}명" if latest else "N/A")

st.divider()

# =====================================================
# SECTION 1 — RATING TRENDS
# =====================================================
st.header("📈 문항별 주간 추이")

df_weeks = weeks_frame(report)

if df_weeks.empty:
    st.info("아직 집계할 응답이 없습니다.")
else:
    week_order = [w.week for w in report.weeks]
    for question in report.rating_questions:
        trend = latest.trends.get(question.id) if latest else None
        st.subheader(question.question_text or str(question.id))
        if trend is not None:
            st.caption(trend_badge(trend))

        df_q = df_weeks[df_weeks["question_id"] == str(question.id)]
        chart = (
            alt.Chart(df_q)
            .mark_line(point=True)
            .encode(
                x=alt.X("week:N", sort=week_order, title=None),
                y=alt.Y("average:Q", scale=alt.Scale(domain=[1, 5]), title="평균"),
                tooltip=["week:N", "average:Q", "count:Q"],
            )
            .properties(height=200)
        )
        st.altair_chart(chart, width="stretch")

st.divider()

# =====================================================
# SECTION 2 — TEXT RESPONSES
# =====================================================
if report.text_questions:
    st.header("💬 의견")
    for question in report.text_questions:
        st.subheader(question.question_text or str(question.id))
        entries = report.text_responses.get(question.id, [])
        if not entries:
            st.caption("아직 응답이 없습니다.")
            continue
        st.dataframe(
            pd.DataFrame(
                [
                    {"응답": e.text, "제출 시각": e.created_at.strftime("%Y-%m-%d %H:%M")}
                    for e in entries
                ]
            ),
            width="stretch",
        )
