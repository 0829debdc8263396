"""The response shape shared by every detection route.

Vendors disagree on field names (``status`` vs ``verdict``, ``score`` vs
``confidence``) and on whether per-model results come back as an array or
an object keyed by model name. Everything is folded into::

    {
      "overall": {classification, verdict, confidence,
                  manipulatedModelsCount, totalModelsUsed},
      "details": [{name, status, confidence}, ...],
      "rawResult": <vendor JSON>,
      "summary": {totalModels, manipulatedCount, authenticCount, detectionLogic},
    }
"""

MANIPULATED = "MANIPULATED"
AUTHENTIC = "AUTHENTIC"

FAKE = "FAKE"
REAL = "REAL"


def _first(entry, *keys, default=None):
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return default


def model_detail(entry, name=None):
    """Map one vendor model entry onto ``{name, status, confidence}``."""
    return {
        "name": _first(entry, "name", "model", default=name or "unknown"),
        "status": _first(entry, "status", "verdict", "classification", default="UNKNOWN"),
        "confidence": _first(entry, "score", "confidence", default=0),
    }


def model_details(source):
    """Normalize an array, or an object keyed by model name, into a detail list."""
    if isinstance(source, dict):
        return [
            model_detail(entry, name=key)
            for key, entry in source.items()
            if isinstance(entry, dict)
        ]
    if isinstance(source, list):
        return [model_detail(entry) for entry in source if isinstance(entry, dict)]
    return []


def count_status(details, status=MANIPULATED):
    return sum(1 for d in details if d.get("status") == status)


def build_report(classification, verdict, confidence, details, raw_result, detection_logic):
    total = len(details)
    manipulated = count_status(details)
    return {
        "overall": {
            "classification": classification,
            "verdict": verdict,
            "confidence": confidence,
            "manipulatedModelsCount": manipulated,
            "totalModelsUsed": total,
        },
        "details": details,
        "rawResult": raw_result,
        "summary": {
            "totalModels": total,
            "manipulatedCount": manipulated,
            "authenticCount": total - manipulated,
            "detectionLogic": detection_logic,
        },
    }
