from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .exporters import report_to_csv
from .model import RangeReportRequest

logger = logging.getLogger(__name__)


def _parse_range() -> RangeReportRequest:
    start_s = request.args.get("startDate")
    end_s = request.args.get("endDate")
    if not start_s or not end_s:
        raise ValidationError("Start date and end date are required")
    try:
        start, end = parse_iso_date(start_s), parse_iso_date(end_s)
    except ValueError:
        raise ValidationError("Dates must use the YYYY-MM-DD format")
    return RangeReportRequest(
        start_date=start,
        end_date=end,
        event_type=request.args.get("type") or None,
        region_id=request.args.get("regionId") or None,
    )


def register(app: Flask, container: Container) -> None:
    access = container.report_access

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Authentication required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def handle_errors(view):
        """Map domain errors to JSON responses with fixed messages."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except NotFoundError as e:
                return jsonify({"error": str(e)}), 404
            except AuthorizationError as e:
                return jsonify({"error": str(e)}), 403
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except Exception:
                logger.exception("Report request failed: %s %s", request.method, request.path)
                return jsonify({"error": "Failed to generate report"}), 500

        return wrapper

    def _viewer_id() -> str:
        return require_non_empty(str(session.get("user_id") or ""), "User")

    def _csv(data: bytes, filename: str):
        return app.response_class(
            data,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/scope", methods=["GET"], endpoint="report_scope")
    @login_required
    @handle_errors
    def report_scope():
        return jsonify(access.scope_for(_viewer_id()))

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="report_dashboard")
    @login_required
    @handle_errors
    def report_dashboard():
        return jsonify(access.dashboard(_viewer_id()))

    @app.route("/api/reports/published", methods=["GET"], endpoint="published_reports")
    @login_required
    @handle_errors
    def published_reports():
        return jsonify([r.to_dict() for r in access.published(_viewer_id())])

    @app.route("/api/reports/custom", methods=["GET"], endpoint="custom_report")
    @login_required
    @handle_errors
    def custom_report():
        result = access.custom_report(_viewer_id(), _parse_range())
        return jsonify(result.to_dict())

    @app.route("/api/reports/custom/export/csv", methods=["GET"], endpoint="custom_report_csv")
    @login_required
    @handle_errors
    def custom_report_csv():
        req = _parse_range()
        result = access.custom_report(_viewer_id(), req)
        return _csv(report_to_csv(result), f"custom_report_{req.start_date}_{req.end_date}.csv")

    @app.route("/api/reports/<event_id>", methods=["GET"], endpoint="event_report")
    @login_required
    @handle_errors
    def event_report(event_id: str):
        return jsonify(access.event_report(_viewer_id(), event_id).to_dict())

    @app.route("/api/reports/<event_id>/compare", methods=["GET"], endpoint="event_report_compare")
    @login_required
    @handle_errors
    def event_report_compare(event_id: str):
        return jsonify(access.compare(_viewer_id(), event_id).to_dict())

    @app.route("/api/reports/<event_id>/export/csv", methods=["GET"], endpoint="event_report_csv")
    @login_required
    @handle_errors
    def event_report_csv(event_id: str):
        result = access.event_report(_viewer_id(), event_id)
        return _csv(report_to_csv(result), f"event_report_{event_id}.csv")

    @app.route("/api/reports/<event_id>/status", methods=["GET"], endpoint="event_report_status")
    @login_required
    @handle_errors
    def event_report_status(event_id: str):
        return jsonify(access.status(_viewer_id(), event_id))

    @app.route("/api/reports/<event_id>/publish", methods=["POST"], endpoint="publish_event_report")
    @login_required
    @handle_errors
    def publish_event_report(event_id: str):
        publication = access.publish(_viewer_id(), event_id)
        return jsonify({"message": "Report published", **publication.to_status()})

    @app.route("/api/reports/<event_id>/unpublish", methods=["POST"], endpoint="unpublish_event_report")
    @login_required
    @handle_errors
    def unpublish_event_report(event_id: str):
        publication = access.unpublish(_viewer_id(), event_id)
        return jsonify({"message": "Report unpublished", **publication.to_status()})
