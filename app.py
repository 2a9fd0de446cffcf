# app.py
import io
from pathlib import Path

import numpy as np
import streamlit as st

from santa_core.errors import SantaError
from santa_core.io import (
    parse_participants,
    participants_to_df,
    assignment_to_df,
    generate_template_csv_bytes,
)
from santa_core.matcher import DEFAULT_MAX_ATTEMPTS, solve
from santa_core.notifier import notify_all
from santa_core.validation import check_participants

# ---------- Page ----------
st.set_page_config(page_title="Secret Santa Draw Preview", page_icon="🎁", layout="centered")
st.title("Secret Santa Draw Preview 🎁")
st.caption("Dry run only: this page never sends email. Use the `secret-santa` command to send.")

# ---------- Session State ----------
def _init_state():
    ss = st.session_state
    ss.setdefault("participants", None)
    ss.setdefault("result", None)
    ss.setdefault("random_seed", 0)

_init_state()

# ---------- Sidebar ----------
with st.sidebar:
    st.header("⚙️ Draw settings")
    use_seed = st.checkbox("Fixed random seed", value=False,
                           help="Same seed and same participants give the same draw.")
    seed = st.number_input("Random seed", min_value=0, max_value=2**31 - 1,
                           value=st.session_state.random_seed, step=1, disabled=not use_seed)
    max_attempts = st.number_input("Random attempts before ILP fallback", min_value=1,
                                   max_value=1_000_000, value=DEFAULT_MAX_ATTEMPTS, step=1000)
    fallback = st.checkbox("ILP fallback", value=True,
                           help="Solve exactly when random sampling gives up.")
    st.session_state.random_seed = seed

    st.divider()
    st.download_button(
        "participants_template.csv",
        data=generate_template_csv_bytes(),
        file_name="participants_template.csv",
        mime="text/csv",
        use_container_width=True,
    )

# ---------- Participants ----------
uploaded = st.file_uploader("Participants (.json, .yaml, .csv)", type=["json", "yaml", "yml", "csv"])
if uploaded is not None:
    try:
        text = uploaded.getvalue().decode("utf-8")
        st.session_state.participants = parse_participants(text, Path(uploaded.name).suffix, uploaded.name)
        st.session_state.result = None
    except (SantaError, UnicodeDecodeError) as e:
        st.session_state.participants = None
        st.error(str(e))

participants = st.session_state.participants
if participants:
    st.dataframe(participants_to_df(participants), use_container_width=True)
    problems = check_participants(participants, require_email=False)
    for msg in problems:
        st.warning(msg)

    if st.button("Draw", type="primary", disabled=bool(problems)):
        rng = np.random.default_rng(int(seed) if use_seed else None)
        try:
            st.session_state.result = solve(participants, rng=rng,
                                            max_attempts=int(max_attempts), fallback=fallback)
        except SantaError as e:
            st.error(str(e))

result = st.session_state.result
if result is not None:
    if result.error:
        st.error(result.error)
    else:
        st.success(f"Valid draw found ({result.strategy}, {result.attempts} attempt(s)).")
        buf = io.StringIO()
        notify_all(result.participants, result.assignment, subject="", body_template="",
                   dry_run=True, out=buf)
        st.code(buf.getvalue(), language=None)
        st.dataframe(assignment_to_df(result.participants, result.assignment),
                     use_container_width=True)
