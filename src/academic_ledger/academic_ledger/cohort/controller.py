from __future__ import annotations

import logging
from datetime import date

from flask import Flask, jsonify, request

from ..common.validators import optional_filter, optional_year
from ..core.exceptions import AmbiguousScopeError, ValidationError
from ..container import Container
from .export import write_csv
from .filters import ScopeFilter
from .serializers import lookup_to_dict, parse_pass_rate_mode, scope_report_to_dict

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.cohort_service

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        # AmbiguousScopeError is a ValidationError too.
        logger.warning("rejected query %s: %s", request.args.to_dict(), e)
        return jsonify({"success": False, "ambiguous": isinstance(e, AmbiguousScopeError), "message": str(e)}), 400

    def _scope() -> ScopeFilter:
        return ScopeFilter.from_mapping(request.args)

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    def dashboard():
        report = service.summary(_scope())
        mode = parse_pass_rate_mode(request.args.get("pass_rate_mode"))
        return jsonify({"success": True, "report": scope_report_to_dict(report, mode=mode)})

    @app.route("/api/cohort", methods=["GET"], endpoint="api_cohort")
    def cohort():
        report = service.detail(_scope())
        mode = parse_pass_rate_mode(request.args.get("pass_rate_mode"))
        return jsonify({"success": True, "report": scope_report_to_dict(report, mode=mode)})

    @app.route("/api/cohort.csv", methods=["GET"], endpoint="api_cohort_csv")
    def cohort_csv():
        records = service.export_records(_scope())
        filename = f"cohort_report_{date.today().strftime('%Y%m%d')}.csv"
        return app.response_class(
            write_csv(records),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/persons/<person_id>", methods=["GET"], endpoint="api_person")
    def person(person_id: str):
        args = request.args.to_dict()
        args.pop("person_id", None)
        lookup = service.person_report(person_id, scope=ScopeFilter.from_mapping(args))
        if not lookup.found:
            return jsonify({"success": False, "message": f"Unknown person {person_id}", **lookup_to_dict(lookup)}), 404
        return jsonify({"success": True, "person": lookup_to_dict(lookup)})

    @app.route("/api/compare", methods=["GET"], endpoint="api_compare")
    def compare():
        dimension = optional_filter(request.args.get("dimension")) or "institution"
        raw_values = [v.strip() for v in (request.args.get("values") or "").split(",") if v.strip()]
        if not raw_values:
            raise ValidationError("values is required (comma separated)")
        if dimension == "admission_year":
            values = [optional_year(v, "values") for v in raw_values]
        else:
            values = raw_values

        args = {k: v for k, v in request.args.items() if k not in {"dimension", "values", dimension}}
        reports = service.compare(ScopeFilter.from_mapping(args), dimension=dimension, values=values)
        mode = parse_pass_rate_mode(request.args.get("pass_rate_mode"))
        return jsonify(
            {
                "success": True,
                "dimension": dimension,
                "reports": [{"value": value, "report": scope_report_to_dict(r, mode=mode)} for value, r in reports.items()],
            }
        )
