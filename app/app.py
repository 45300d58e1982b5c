# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
app.py — Streamlit weather lookup with Apple-inspired dark/light UI.

Run with: streamlit run app/app.py
Requires: pip install -e ".[ui]"
"""

import html
import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st
import plotly.graph_objects as go

from weather_now.config import DEFAULT_CONFIG, load_config
from weather_now.coords import format_coordinate_pair, parse_coordinates
from weather_now.models import PlaceCandidate, ResolvedPlace
from weather_now.preferences import Preferences, load_preferences, save_preferences, toggle_theme
from weather_now.reverse import ReverseResolver
from weather_now.tasks import PlaceLookup
from weather_now.utils import ProviderError, format_local_time, setup_logging
from weather_now.weather import (
    degrees_to_compass,
    describe_weather_code,
    fetch_forecast,
    last_24_temperatures,
    temperature_symbol,
)


# ─────────────────────────────────────────────────────────────
# Page config — must be first Streamlit call
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="WeatherNow",
    page_icon="🌤",
    layout="centered",
    initial_sidebar_state="collapsed",
)


# ─────────────────────────────────────────────────────────────
# Configuration, logging, preferences
# ─────────────────────────────────────────────────────────────

try:
    config = load_config()
except FileNotFoundError:
    config = DEFAULT_CONFIG
except ValueError as e:
    st.warning(f"Ignoring invalid config.toml: {e}")
    config = DEFAULT_CONFIG

logger = setup_logging(Path(config["log"]["path"]), config["log"]["level"])
prefs_path = Path(config["preferences"]["path"])

resolver = ReverseResolver(
    language=config["reverse"]["language"],
    user_agent=config["reverse"]["user_agent"],
    timeout=config["reverse"]["timeout"],
    major_cities=config["reverse"]["major_cities"],
    logger=logger.getChild("reverse"),
)


# ─────────────────────────────────────────────────────────────
# Session state initialisation
# ─────────────────────────────────────────────────────────────

if "prefs" not in st.session_state:
    st.session_state.prefs = load_preferences(prefs_path)
if "selected" not in st.session_state:
    st.session_state.selected = None      # ResolvedPlace or None
if "suggestions" not in st.session_state:
    st.session_state.suggestions = []
if "nearby" not in st.session_state:
    st.session_state.nearby = []
if "forecast" not in st.session_state:
    st.session_state.forecast = None
if "forecast_key" not in st.session_state:
    st.session_state.forecast_key = None
if "error" not in st.session_state:
    st.session_state.error = None
if "lookup" not in st.session_state:
    st.session_state.lookup = PlaceLookup(
        resolver,
        count=config["search"]["count"],
        language=config["search"]["language"],
        min_chars=config["search"]["min_query_length"],
        nearby_count=config["reverse"]["nearby_count"],
    )


# ─────────────────────────────────────────────────────────────
# CSS injection
# ─────────────────────────────────────────────────────────────

THEME_COLORS = {
    "dark": {"bg": "#0a0a0a", "card": "#1c1c1e", "pill": "#2c2c2e", "text": "#f5f5f7",
             "muted": "#8e8e93", "border": "#3a3a3c"},
    "light": {"bg": "#f5f5f7", "card": "#ffffff", "pill": "#f0f0f2", "text": "#1d1d1f",
              "muted": "#6e6e73", "border": "#d2d2d7"},
}
colors = THEME_COLORS[st.session_state.prefs.theme]

CUSTOM_CSS = f"""
<style>
  /* ── Reset Streamlit chrome ── */
  #MainMenu, footer, header {{ visibility: hidden; }}
  .block-container {{ padding-top: 2rem; padding-bottom: 4rem; max-width: 760px; }}

  /* ── Typography & base ── */
  html, body, [class*="css"], .stApp {{
    font-family: -apple-system, BlinkMacSystemFont, "SF Pro Display",
                 "SF Pro Text", "Segoe UI", Roboto, sans-serif;
    background-color: {colors["bg"]};
    color: {colors["text"]};
  }}

  /* ── Cards ── */
  .wn-card {{
    background: {colors["card"]};
    border: 1px solid {colors["border"]};
    border-radius: 16px;
    padding: 24px 28px;
    margin-bottom: 1rem;
  }}
  .wn-place {{ font-size: 1.6rem; font-weight: 700; letter-spacing: -0.02em; }}
  .wn-coords, .wn-local-time, .wn-hint {{ color: {colors["muted"]}; font-size: 0.9rem; }}
  .wn-temp {{ font-size: 5rem; font-weight: 700; letter-spacing: -0.04em; line-height: 1; }}

  /* ── Stat pills ── */
  .stat-pill {{
    background: {colors["pill"]};
    border-radius: 12px;
    padding: 12px 16px;
    margin-bottom: 8px;
  }}
  .stat-label {{
    font-size: 0.68rem;
    text-transform: uppercase;
    letter-spacing: 0.08em;
    color: {colors["muted"]};
  }}
  .stat-value {{ font-size: 1.4rem; font-weight: 700; color: {colors["text"]}; }}

  /* ── Error card ── */
  .error-card {{
    background: rgba(255, 69, 58, 0.1);
    border: 1px solid rgba(255, 69, 58, 0.3);
    border-radius: 12px;
    color: #ff453a;
    padding: 16px 20px;
    text-align: center;
    margin: 1rem 0;
  }}

  /* ── Footer ── */
  .wn-footer {{
    text-align: center;
    color: {colors["muted"]};
    font-size: 0.8rem;
    padding: 3rem 0 1rem;
  }}
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def stat_html(label: str, value: str, unit: str = "") -> str:
    """Render a stat pill as HTML."""
    return f"""
    <div class="stat-pill">
      <div class="stat-label">{label}</div>
      <div class="stat-value">{value}<span class="stat-unit"> {unit}</span></div>
    </div>
    """


def set_preferences(prefs: Preferences) -> None:
    st.session_state.prefs = prefs
    save_preferences(prefs, prefs_path)


def select_place(candidate: PlaceCandidate, nearby: list[PlaceCandidate] | None = None) -> None:
    """Replace the current selection and clear transient search state."""
    st.session_state.lookup.cancel()
    st.session_state.selected = ResolvedPlace.select(candidate)
    st.session_state.suggestions = []
    st.session_state.nearby = nearby or []
    st.session_state.forecast = None
    st.session_state.forecast_key = None


def run_search(text: str) -> None:
    """Handle a submitted query: coordinates resolve directly, text searches."""
    st.session_state.error = None
    result = st.session_state.lookup.submit(text)
    if result is None:
        return
    if result.place is not None:
        select_place(result.place, list(result.nearby))
        return
    st.session_state.suggestions = list(result.suggestions)


def ensure_forecast() -> None:
    """Fetch the forecast when the selection or the unit changed."""
    selected = st.session_state.selected
    unit = st.session_state.prefs.unit
    key = (selected.place.id, selected.selected_at, unit)
    if st.session_state.forecast_key == key:
        return
    try:
        st.session_state.forecast = fetch_forecast(
            selected.place, unit=unit, timeout=config["forecast"]["timeout"]
        )
        st.session_state.error = None
    except (ProviderError, RuntimeError, ValueError) as e:
        st.session_state.forecast = None
        st.session_state.error = str(e) or "Failed to load weather"
    st.session_state.forecast_key = key


@st.fragment(run_every=60)
def local_time_line(timezone: str) -> None:
    """Local time at the selected place, refreshed every minute."""
    now = format_local_time(timezone)
    if now:
        st.markdown(f'<div class="wn-local-time">Local time: {now}</div>', unsafe_allow_html=True)


def sparkline(values: list[float], symbol: str) -> go.Figure:
    fig = go.Figure(go.Scatter(
        y=values,
        mode="lines",
        line=dict(color="#0a84ff", width=2),
        hoverinfo="y",
    ))
    fig.update_layout(
        title=dict(
            text=f"Past 24h · {min(values):.0f}{symbol} – {max(values):.0f}{symbol}",
            font=dict(color=colors["muted"], size=12),
        ),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=8, r=8, t=32, b=8),
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        height=120,
        showlegend=False,
    )
    return fig


# ─────────────────────────────────────────────────────────────
# SECTION 1: Navbar — theme and unit
# ─────────────────────────────────────────────────────────────

brand_col, theme_col, unit_col = st.columns([3, 1, 2])
with brand_col:
    st.markdown("### ✦ WeatherNow")
with theme_col:
    theme = st.session_state.prefs.theme
    if st.button("☀️" if theme == "dark" else "🌙",
                 help=f"Switch to {'light' if theme == 'dark' else 'dark'} mode"):
        set_preferences(toggle_theme(st.session_state.prefs))
        st.rerun()
with unit_col:
    unit_label = st.radio(
        label="Unit",
        options=["°C", "°F"],
        index=0 if st.session_state.prefs.unit == "celsius" else 1,
        horizontal=True,
        label_visibility="collapsed",
    )
    chosen_unit = "celsius" if unit_label == "°C" else "fahrenheit"
    if chosen_unit != st.session_state.prefs.unit:
        set_preferences(Preferences(unit=chosen_unit, theme=st.session_state.prefs.theme))

st.caption("Fast, keyless weather powered by Open‑Meteo")


# ─────────────────────────────────────────────────────────────
# SECTION 2: Search
# ─────────────────────────────────────────────────────────────

with st.form("search", clear_on_submit=False, border=False):
    query = st.text_input(
        label="Search city",
        placeholder="e.g., Hyderabad, London, 18.52, 73.87 or 16°11'07.0\"N 74°27'43.8\"E",
    )
    submitted = st.form_submit_button("Search")

if submitted and query.strip():
    run_search(query.strip())

if st.session_state.suggestions:
    for s in st.session_state.suggestions:
        detail = ", ".join(p for p in (s.admin1, s.country) if p)
        if st.button(f"{s.name} · {detail}" if detail else s.name, key=f"suggestion-{s.id}"):
            select_place(s)
            st.rerun()
elif (submitted and parse_coordinates(query) is None
      and len(query.strip()) >= config["search"]["min_query_length"]):
    st.markdown('<div class="wn-hint">No matches</div>', unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# SECTION 3: Current conditions
# ─────────────────────────────────────────────────────────────

selected = st.session_state.selected
if selected is not None:
    ensure_forecast()

if st.session_state.error:
    st.markdown(f'<div class="error-card">⚠️ {html.escape(st.session_state.error)}</div>', unsafe_allow_html=True)

forecast = st.session_state.forecast
if selected is not None and forecast:
    place = selected.place
    current = forecast.get("current", {})
    symbol = temperature_symbol(st.session_state.prefs.unit)

    st.markdown(
        f'<div class="wn-card">'
        f'<div class="wn-place">{html.escape(selected.label)}</div>'
        f'<div class="wn-coords">{format_coordinate_pair(place.latitude, place.longitude)}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )

    # ── Nearby alternatives
    limit = config["reverse"]["nearby_display_limit"]
    alternatives = [p for p in st.session_state.nearby if p.label and p.label != selected.label]
    if len(alternatives) == 1:
        alt = alternatives[0]
        if st.button(f"Set to: {alt.label}", key=f"nearby-{alt.id}"):
            select_place(alt)
            st.rerun()
    elif alternatives:
        st.markdown('<div class="wn-hint">Did you mean:</div>', unsafe_allow_html=True)
        for alt in alternatives[:limit]:
            if st.button(alt.label, key=f"nearby-{alt.id}-{alt.label}"):
                select_place(alt)
                st.rerun()

    timezone = place.timezone if place.timezone != "auto" else forecast.get("timezone", "")
    local_time_line(timezone)

    temps = last_24_temperatures(forecast)
    if temps:
        st.plotly_chart(sparkline(temps, symbol), use_container_width=True,
                        config={"displayModeBar": False})

    pill_cols = st.columns(2)
    wind_dir = current.get("wind_direction_10m")
    stats = [
        ("Temperature", f"{current.get('temperature_2m', '—')}", symbol),
        ("Feels like", f"{current.get('apparent_temperature', '—')}", symbol),
        ("Humidity", f"{current.get('relative_humidity_2m', '—')}", "%"),
        (f"Wind · {degrees_to_compass(wind_dir)}" if wind_dir is not None else "Wind",
         f"{current.get('wind_speed_10m', '—')}", "km/h"),
    ]
    for i, (label, val, unit) in enumerate(stats):
        with pill_cols[i % 2]:
            st.markdown(stat_html(label, val, unit), unsafe_allow_html=True)

    st.markdown(
        f'<div class="wn-hint" style="text-align:center">'
        f'{describe_weather_code(current.get("weather_code"))}</div>',
        unsafe_allow_html=True,
    )
elif selected is None:
    st.markdown('<div class="wn-hint">Search a city to see current weather.</div>', unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# Footer
# ─────────────────────────────────────────────────────────────

st.markdown(
    '<div class="wn-footer">'
    'Data from <a href="https://open-meteo.com" style="color:#0a84ff;text-decoration:none;">Open-Meteo</a>'
    ' Geocoding and Forecast APIs &nbsp;·&nbsp; Reverse geocoding © OpenStreetMap contributors'
    '</div>',
    unsafe_allow_html=True,
)
