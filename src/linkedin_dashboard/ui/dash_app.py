from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Dash, Input, Output, State, ctx, dcc, html, no_update
from dash.exceptions import PreventUpdate

from linkedin_dashboard.core.plotting import (
    prepare_bar_plot,
    prepare_pie_plot,
    url_from_click,
    zoom_caption,
)
from linkedin_dashboard.core.series import ENGAGEMENT, IMPRESSIONS
from linkedin_dashboard.core.state import DashboardState, load_csv_text, reset_zoom
from linkedin_dashboard.core.zoom import apply_selection, dates_from_selection
from linkedin_dashboard.data.loaders import decode_upload_contents, is_csv_filename
from linkedin_dashboard.utils.log import log_event, log_exception
from linkedin_dashboard.version import APP_TITLE

CHART_TITLES: dict[str, str] = {
    IMPRESSIONS: "Impressions by Post",
    ENGAGEMENT: "Engagement by Post",
}

METRIC_LABELS: dict[str, str] = {
    IMPRESSIONS: "Impressions",
    ENGAGEMENT: "Engagements",
}

UPLOAD_LABELS: dict[str, str] = {
    IMPRESSIONS: "Upload Impressions Data",
    ENGAGEMENT: "Upload Engagement Data",
}

GRAPH_CONFIG = {"displaylogo": False, "modeBarButtonsToRemove": ["lasso2d", "autoScale2d"]}


def _dash_assets_dir() -> str:
    return str(Path(__file__).resolve().parents[1] / "assets" / "dash")


def _empty_dashboard_session() -> dict[str, Any]:
    return {"dashboard": DashboardState.with_samples().to_dict()}


def _state_from_session(session_data: dict[str, Any] | None) -> tuple[DashboardState, dict[str, Any]]:
    session = dict(session_data or {})
    if not isinstance(session.get("dashboard"), dict):
        session = _empty_dashboard_session()
    state = DashboardState.from_dict(session.get("dashboard"))
    return state, session


def _session_from_state(state: DashboardState, session: dict[str, Any]) -> dict[str, Any]:
    out = dict(session)
    out["dashboard"] = state.to_dict()
    return out


def _status_alert(message: str, kind: str = "info"):
    return html.Div(message, className=f"ldb-status {kind}")


def _apply_upload(state: DashboardState, kind: str, contents: str | None, filename: str | None):
    label = METRIC_LABELS[kind].lower()
    if not contents:
        raise PreventUpdate
    if not is_csv_filename(filename):
        log_event("upload", f"{kind}: rejected non-CSV file {filename!r}")
        return _status_alert(f"{filename or 'Upload'} is not a .csv file; {label} data unchanged.", "warning")
    try:
        text = decode_upload_contents(contents)
    except Exception as exc:
        log_exception(f"upload {kind}: could not read {filename!r}")
        return _status_alert(f"Could not read {filename or 'file'}: {exc}", "danger")
    days = load_csv_text(state, kind, text)
    if not days:
        return _status_alert(f"No valid data found in {filename or 'the CSV file'}; {label} data unchanged.", "warning")
    return _status_alert(f"Loaded {days} days of {label} data from {filename or 'upload'}.", "success")


def _apply_dashboard_action(
    session_data: dict[str, Any] | None,
    trigger: str | None,
    *,
    upload_contents: dict[str, str | None] | None = None,
    upload_filenames: dict[str, str | None] | None = None,
    selections: dict[str, dict[str, Any] | None] | None = None,
):
    """Run one user action against the session. Returns (session, status)."""
    state, session = _state_from_session(session_data)
    upload_contents = upload_contents or {}
    upload_filenames = upload_filenames or {}
    selections = selections or {}
    status = no_update

    if trigger in ("impressions-upload", "engagement-upload"):
        kind = IMPRESSIONS if trigger == "impressions-upload" else ENGAGEMENT
        status = _apply_upload(state, kind, upload_contents.get(kind), upload_filenames.get(kind))
    elif trigger in ("impressions-chart", "engagement-chart"):
        kind = IMPRESSIONS if trigger == "impressions-chart" else ENGAGEMENT
        view = state.view(kind)
        dates = dates_from_selection(selections.get(kind), [p.date for p in view.zoomed])
        if not dates:
            raise PreventUpdate
        apply_selection(view, kind, dates)
    elif trigger in ("impressions-zoom-out-btn", "engagement-zoom-out-btn"):
        kind = IMPRESSIONS if trigger == "impressions-zoom-out-btn" else ENGAGEMENT
        reset_zoom(state, kind)
    else:
        raise PreventUpdate

    return _session_from_state(state, session), status


def _bar_figure(state: DashboardState, kind: str) -> go.Figure:
    data = prepare_bar_plot(state.view(kind), METRIC_LABELS[kind])
    fig = go.Figure(
        data=[
            go.Bar(
                x=data.dates,
                y=data.values,
                name=data.metric_label,
                marker=dict(color=data.colors),
                customdata=[[url, d] for url, d in zip(data.urls, data.dates)],
                hovertext=data.hover,
                hoverinfo=data.hoverinfo,
            )
        ]
    )
    fig.update_layout(
        template="plotly_white",
        margin=dict(l=20, r=20, t=24, b=24),
        height=300,
        dragmode="select",
        selectdirection="h",
        showlegend=False,
        xaxis=dict(
            type="category",
            tickmode="array",
            tickvals=data.tickvals,
            ticktext=data.ticktext,
            showgrid=False,
            linecolor="#E5E7EB",
        ),
        yaxis=dict(linecolor="#E5E7EB", fixedrange=True),
    )
    return fig


def _pie_figure(state: DashboardState) -> go.Figure:
    # Derived from the full engagement series on every render.
    data = prepare_pie_plot(state.engagement.series)
    fig = go.Figure(
        data=[
            go.Pie(
                labels=data.labels,
                values=data.values,
                marker=dict(colors=data.colors),
                customdata=data.customdata,
                hovertext=data.hover,
                hoverinfo="text",
                textinfo="none",
                sort=False,
            )
        ]
    )
    fig.update_layout(
        template="plotly_white",
        margin=dict(l=20, r=20, t=24, b=24),
        height=300,
        showlegend=False,
    )
    return fig


def _upload_control(kind: str) -> dcc.Upload:
    color = "primary" if kind == IMPRESSIONS else "success"
    return dcc.Upload(
        id=f"{kind}-upload",
        accept=".csv",
        multiple=False,
        children=dbc.Button(UPLOAD_LABELS[kind], color=color, className="ldb-upload-btn"),
    )


def _bar_card(kind: str) -> dbc.Card:
    return dbc.Card(
        className="ldb-card",
        children=[
            dbc.CardHeader(html.H2(CHART_TITLES[kind], className="ldb-card-title")),
            dbc.CardBody(
                [
                    dbc.Button("Zoom Out", id=f"{kind}-zoom-out-btn", color="primary", size="sm"),
                    html.Div(id=f"{kind}-zoom-label", className="ldb-muted"),
                    dcc.Graph(id=f"{kind}-chart", config=GRAPH_CONFIG),
                ]
            ),
        ],
    )


def _pie_card() -> dbc.Card:
    return dbc.Card(
        className="ldb-card",
        children=[
            dbc.CardHeader(html.H2("Engagement Distribution", className="ldb-card-title")),
            dbc.CardBody(dcc.Graph(id="distribution-chart", config=GRAPH_CONFIG)),
        ],
    )


def _root_layout(initial_session: dict[str, Any] | None = None) -> html.Div:
    session = initial_session if isinstance(initial_session, dict) else _empty_dashboard_session()
    return html.Div(
        id="app-shell",
        className="ldb-app-shell",
        children=[
            dcc.Store(id="dashboard-session", storage_type="memory", data=session),
            dcc.Store(id="open-url-target", storage_type="memory", data=None),
            html.Div(id="open-url-sink", hidden=True),
            html.H1(APP_TITLE, className="ldb-title"),
            html.Div(
                className="ldb-upload-row",
                children=[_upload_control(IMPRESSIONS), _upload_control(ENGAGEMENT)],
            ),
            html.Div(id="upload-status-slot"),
            _bar_card(IMPRESSIONS),
            _bar_card(ENGAGEMENT),
            _pie_card(),
        ],
    )


def create_app() -> Dash:
    app = Dash(
        __name__,
        assets_folder=_dash_assets_dir(),
        external_stylesheets=[dbc.themes.BOOTSTRAP],
        title=APP_TITLE,
    )
    app.layout = _root_layout()
    _register_callbacks(app)
    return app


def _register_callbacks(app: Dash) -> None:
    @app.callback(
        Output("dashboard-session", "data"),
        Output("upload-status-slot", "children"),
        Input("impressions-upload", "contents"),
        Input("engagement-upload", "contents"),
        Input("impressions-chart", "selectedData"),
        Input("engagement-chart", "selectedData"),
        Input("impressions-zoom-out-btn", "n_clicks"),
        Input("engagement-zoom-out-btn", "n_clicks"),
        State("impressions-upload", "filename"),
        State("engagement-upload", "filename"),
        State("dashboard-session", "data"),
        prevent_initial_call=True,
        running=[
            (Output("impressions-upload", "disabled"), True, False),
            (Output("engagement-upload", "disabled"), True, False),
        ],
    )
    def _dashboard_actions(
        impressions_contents,
        engagement_contents,
        impressions_selection,
        engagement_selection,
        _impressions_zoom_out,
        _engagement_zoom_out,
        impressions_filename,
        engagement_filename,
        session_data,
    ):
        try:
            return _apply_dashboard_action(
                session_data,
                ctx.triggered_id,
                upload_contents={IMPRESSIONS: impressions_contents, ENGAGEMENT: engagement_contents},
                upload_filenames={IMPRESSIONS: impressions_filename, ENGAGEMENT: engagement_filename},
                selections={IMPRESSIONS: impressions_selection, ENGAGEMENT: engagement_selection},
            )
        except PreventUpdate:
            raise
        except Exception as exc:
            log_exception(f"dashboard action {ctx.triggered_id}")
            return no_update, _status_alert(f"{type(exc).__name__}: {exc}", "danger")

    @app.callback(
        Output("impressions-chart", "figure"),
        Output("engagement-chart", "figure"),
        Output("distribution-chart", "figure"),
        Output("impressions-zoom-label", "children"),
        Output("engagement-zoom-label", "children"),
        Input("dashboard-session", "data"),
    )
    def _render_charts(session_data):
        state, _session = _state_from_session(session_data)
        return (
            _bar_figure(state, IMPRESSIONS),
            _bar_figure(state, ENGAGEMENT),
            _pie_figure(state),
            zoom_caption(state.impressions),
            zoom_caption(state.engagement),
        )

    @app.callback(
        Output("open-url-target", "data"),
        Input("impressions-chart", "clickData"),
        Input("engagement-chart", "clickData"),
        Input("distribution-chart", "clickData"),
        State("open-url-target", "data"),
        prevent_initial_call=True,
    )
    def _click_through(impressions_click, engagement_click, distribution_click, current):
        click = {
            "impressions-chart": impressions_click,
            "engagement-chart": engagement_click,
            "distribution-chart": distribution_click,
        }.get(ctx.triggered_id)
        url = url_from_click(click)
        if not url:
            raise PreventUpdate
        nonce = int((current or {}).get("nonce", 0)) + 1
        return {"url": url, "nonce": nonce}

    app.clientside_callback(
        """
        function(target) {
            if (target && target.url) {
                window.open(target.url, "_blank");
            }
            return window.dash_clientside.no_update;
        }
        """,
        Output("open-url-sink", "children"),
        Input("open-url-target", "data"),
        prevent_initial_call=True,
    )


def main(**run_kwargs) -> None:
    app = create_app()
    app.run(**run_kwargs)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} (Dash)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    parser.add_argument("--reloader", dest="use_reloader", action="store_true", default=False)
    parser.add_argument("--no-reloader", dest="use_reloader", action="store_false")
    args = parser.parse_args()
    main(
        host=args.host,
        port=args.port,
        debug=args.debug,
        use_reloader=args.use_reloader,
    )
