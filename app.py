"""EverGrow (Streamlit)

Principles:
- UI only renders + triggers.
- Core rules and the session engine are pure Python modules.
- The UI is the external scheduler: each rerun feeds wall-clock time into tick().

Run locally: streamlit run app.py
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict
from datetime import datetime
from typing import Any

import streamlit as st

import core
from core.balance import DEFAULT_BALANCES, get_balance_spec
from core.errors import EngineError
from core.state import format_amount, to_plain_dict

from engine.config import EngineConfig
from engine.logging import dumps_run_export
from engine.persistence import dumps_save, loads_save
from engine.session import GameSession


APP_TITLE = "EverGrow"
APP_SUBTITLE = "Grow biomass, buy upgrades, prestige for permanent multipliers."
APP_VERSION = "1.0.0"

st.set_page_config(page_title=APP_TITLE, page_icon="🌱", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 2.4rem;}
.pill {display: inline-block; margin: 0 6px 4px 0; padding: 1px 9px;
  border-radius: 12px; background: rgba(90,200,120,0.12); font-size: 12px;}
.pill.event {background: rgba(250,200,60,0.18);}
.small {font-size: 12.5px; opacity: .7;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "base_seed" not in ss:
        ss.base_seed = 42
    if "balance_key" not in ss:
        ss.balance_key = "standard"
    if "session" not in ss:
        ss.session = GameSession(config=EngineConfig(base_seed=int(ss.base_seed), balance_key=str(ss.balance_key)))
    if "last_wall" not in ss:
        ss.last_wall = time.time()
    if "last_error" not in ss:
        ss.last_error = ""
    if "last_save" not in ss:
        ss.last_save = None


def _reset_run() -> None:
    ss = st.session_state
    keep = {"base_seed": ss.get("base_seed", 42), "balance_key": ss.get("balance_key", "standard")}
    for k in list(ss.keys()):
        del ss[k]
    for k, v in keep.items():
        ss[k] = v
    _ensure_state()


def _advance_clock() -> None:
    """Feed wall time since the last rerun into the engine."""
    ss = st.session_state
    now = time.time()
    ss.session.tick(now - float(ss.last_wall))
    ss.last_wall = now
    if ss.session.save_due():
        ss.last_save = ss.session.mark_saved()


def _run_action(fn: Any, *args: Any) -> None:
    ss = st.session_state
    try:
        fn(*args)
        ss.last_error = ""
    except EngineError as e:
        ss.last_error = str(e)


# =========================
# UI Pages
# =========================


def page_play() -> None:
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    live_play()


@st.fragment(run_every=1.0)
def live_play() -> None:
    """Everything that moves with the clock. Reruns on its own every second."""
    _advance_clock()
    ss = st.session_state
    session: GameSession = ss.session
    state = session.get_state()

    st.caption(f"Session time {state.clock:,.0f}s · lifetime {format_amount(state.total_resource_earned)}")
    a, b, c, d = st.columns(4)
    a.metric("Biomass", format_amount(state.resource))
    b.metric("Per second", format_amount(state.production_per_second))
    c.metric("Per click", format_amount(state.production_per_click))
    d.metric("Multiplier", f"×{state.global_multiplier:.2f}")

    event = session.get_active_event()
    if event is not None:
        left = max(0.0, event.end_time - state.clock)
        st.markdown(f"<span class='pill event'>⚡ {event.title} · {left:.0f}s left</span>", unsafe_allow_html=True)
    for m in state.temporary_multipliers:
        st.markdown(f"<span class='pill'>{m.kind} ×{m.magnitude:g} · {m.remaining:.0f}s</span>", unsafe_allow_html=True)

    if ss.last_error:
        st.warning(ss.last_error)

    if st.button("🌱 Grow", use_container_width=True):
        _run_action(session.manual_action)
        st.rerun(scope="fragment")

    st.markdown("### Upgrades")
    for row in session.upgrade_rows():
        col1, col2 = st.columns([3, 1])
        with col1:
            goal = f" · next milestone at {row['next_milestone']}" if row["next_milestone"] else ""
            st.markdown(f"**{row['name']}** · owned {row['owned']}{goal}  \n<span class='small'>{row['description']}</span>", unsafe_allow_html=True)
        with col2:
            if st.button(f"Buy ({format_amount(row['cost'])})", key=f"buy-{row['id']}", disabled=not row["affordable"], use_container_width=True):
                _run_action(session.purchase, row["id"])
                st.rerun(scope="fragment")

    st.markdown("### Prestige")
    progress = session.prestige_progress()
    reward = progress["reward"]
    st.progress(float(progress["progress"]), text=f"{format_amount(state.total_resource_earned)} / {format_amount(state.prestige_threshold)}")
    st.caption(f"Reward now: {reward.points} points, +{reward.bonus_multiplier_delta:.2f} permanent multiplier" + (f" · {reward.milestone}" if reward.milestone else ""))
    if st.button("✨ Prestige", disabled=not progress["eligible"] or reward.points <= 0):
        _run_action(session.attempt_prestige)
        st.rerun()


def page_history() -> None:
    ss = st.session_state
    st.title("History")
    logs = ss.session.logs
    if not logs:
        st.info("Nothing yet.")
        return
    for item in reversed(logs[-200:]):
        st.markdown(f"`{item.get('t', 0.0):8.1f}s` **{item.get('kind')}** {json.dumps({k: v for k, v in item.items() if k not in ('t', 'kind')})}")


def page_debug() -> None:
    ss = st.session_state
    st.title("Debug")

    st.subheader("Core")
    st.json({"api_version": getattr(core, "API_VERSION", None), "app_version": APP_VERSION})

    st.subheader("EngineConfig")
    st.json(asdict(ss.session.config))

    st.subheader("NumericState")
    st.json(json.loads(json.dumps(to_plain_dict(ss.session.get_state()), default=str)))


def save_controls() -> None:
    ss = st.session_state
    session: GameSession = ss.session
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Save / Export")

    st.sidebar.download_button(
        "Download save",
        data=dumps_save(session.to_save_dict()).encode("utf-8"),
        file_name="evergrow_save.json",
        mime="application/json",
    )
    st.sidebar.download_button(
        "Download run log",
        data=dumps_run_export(session.export_run()).encode("utf-8"),
        file_name=f"evergrow_run_{datetime.utcnow().strftime('%Y%m%d%H%M%S')}.json",
        mime="application/json",
    )

    up = st.sidebar.file_uploader("Load save", type=["json"], accept_multiple_files=False)
    if up is not None and st.sidebar.button("Apply save"):
        try:
            data = loads_save(up.read().decode("utf-8"))
            ss.session = GameSession.from_save_dict(data, session.config)
            ss.last_wall = time.time()
            st.sidebar.success("Save loaded.")
            st.rerun()
        except ValueError as e:
            st.sidebar.error(f"Import failed: {e}")


# =========================
# Sidebar
# =========================


def sidebar() -> str:
    ss = st.session_state
    session: GameSession = ss.session

    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    st.sidebar.markdown("---")

    keys = list(DEFAULT_BALANCES.keys())
    ix = keys.index(ss.balance_key) if ss.balance_key in keys else 0
    ss.balance_key = st.sidebar.selectbox("Balance", keys, index=ix)
    st.sidebar.caption(get_balance_spec(ss.balance_key).desc)
    ss.base_seed = st.sidebar.number_input("Seed (event rolls)", value=int(ss.base_seed), step=1)

    cols = st.sidebar.columns(2)
    with cols[0]:
        if st.button("Daily claim", use_container_width=True):
            if not session.claim_daily_streak(time.time()):
                ss.last_error = "Already claimed today."
            st.rerun()
    with cols[1]:
        if st.button("New game", use_container_width=True):
            _reset_run()
            st.rerun()
    st.sidebar.caption(f"Streak: {session.streak.current} (best {session.streak.longest})")

    save_controls()

    st.sidebar.markdown("---")
    return st.sidebar.radio("Page", ["Play", "History", "Debug"], index=0)


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    _advance_clock()
    page = sidebar()

    if page == "Play":
        page_play()
    elif page == "History":
        page_history()
    else:
        page_debug()


if __name__ == "__main__":
    main()
