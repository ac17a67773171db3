# gleam_api/schemas/scan_schema.py
import math

from marshmallow import Schema, fields, validate, pre_load, post_load, EXCLUDE

from gleam_api.models.scan import DetectedIssue, Recommendations, ScanResult, Severity

RECOMMENDATION_CATEGORIES = ('immediate', 'daily', 'weekly', 'caution')


class DetectedIssueSchema(Schema):
    """A single finding inside a ScanResult."""
    class Meta:
        unknown = EXCLUDE

    key = fields.Str(required=True)
    severity = fields.Str(required=True, validate=validate.OneOf([s.value for s in Severity]))
    notes = fields.Str(required=True)

    @pre_load
    def normalize_severity(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('severity'), str):
            data = dict(data)
            data['severity'] = data['severity'].strip().lower()
        return data

    @post_load
    def make_issue(self, data, **kwargs):
        return DetectedIssue(**data)


class ScanResultSchema(Schema):
    """
    Validates the vision model's reply and decodes persisted scan results.

    Records written before the field was renamed carry 'planSummary' instead of
    'personalTakeaway'; the old name is still accepted when the new one is absent.
    """
    class Meta:
        unknown = EXCLUDE

    whitenessScore = fields.Int(required=True, strict=True, validate=validate.Range(min=0, max=100))
    shade = fields.Str(required=True)
    detectedIssues = fields.List(fields.Nested(DetectedIssueSchema), load_default=list)
    confidence = fields.Float(required=True, validate=validate.Range(min=0.0, max=1.0))
    referralNeeded = fields.Bool(load_default=False)
    disclaimer = fields.Str(load_default="")
    personalTakeaway = fields.Str(load_default="")

    @pre_load
    def normalize_result(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # Fractional scores are rounded to the nearest integer, not truncated.
        score = data.get('whitenessScore')
        if isinstance(score, float) and math.isfinite(score):
            data['whitenessScore'] = int(round(score))

        if 'detectedIssues' in data and data['detectedIssues'] is None:
            data['detectedIssues'] = []

        if data.get('personalTakeaway') is None and isinstance(data.get('planSummary'), str):
            data['personalTakeaway'] = data['planSummary']
        return data

    @post_load
    def make_result(self, data, **kwargs):
        return ScanResult(**data)


class StoredDetectedIssueSchema(DetectedIssueSchema):
    """Finding read back from Firestore; older records may carry any severity label."""
    key = fields.Str(load_default="")
    severity = fields.Str(load_default="")
    notes = fields.Str(load_default="")


class StoredScanResultSchema(ScanResultSchema):
    """
    Decodes results already persisted in Firestore.

    Range and severity checks apply to model replies only; a stored record is
    returned as it was saved, with missing fields defaulted.
    """
    whitenessScore = fields.Int(load_default=0)
    shade = fields.Str(load_default="")
    detectedIssues = fields.List(fields.Nested(StoredDetectedIssueSchema), load_default=list)
    confidence = fields.Float(load_default=0.0)


class RecommendationsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    immediate = fields.List(fields.Str(), required=True)
    daily = fields.List(fields.Str(), required=True)
    weekly = fields.List(fields.Str(), required=True)
    caution = fields.List(fields.Str(), required=True)

    @post_load
    def make_recommendations(self, data, **kwargs):
        return Recommendations(**data)


class PlanResponseSchema(Schema):
    """
    Plan reply from the language model. The model is asked for {"plan": {...}}
    but a bare four-category object is accepted as well.
    """
    class Meta:
        unknown = EXCLUDE

    plan = fields.Nested(RecommendationsSchema, required=True)

    @pre_load
    def wrap_bare_plan(self, data, **kwargs):
        if isinstance(data, dict) and 'plan' not in data \
                and all(category in data for category in RECOMMENDATION_CATEGORIES):
            return {'plan': data}
        return data


class AnalyzeResponseSchema(Schema):
    """Response body of POST /analyze."""
    result = fields.Nested(ScanResultSchema, required=True)
    contextTags = fields.List(fields.Str(), required=True)


class LatestScanResponseSchema(Schema):
    """Response body of GET /history/latest. Tags and timestamp stay server-side."""
    result = fields.Nested(ScanResultSchema, required=True)
