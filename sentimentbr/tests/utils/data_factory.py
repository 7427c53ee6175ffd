# -*- coding: utf-8 -*-
from datetime import datetime, timedelta


def record_row(id_, sentiment="positive", days_ago=0.0, text=None, confidence=80):
    """One stored analysis as it appears in the JSON data file."""
    created = datetime.now().astimezone() - timedelta(days=days_ago)
    return {
        "id": id_,
        "text": text or f"texto de exemplo número {id_}",
        "sentiment": sentiment,
        "confidence": confidence,
        "createdAt": created.isoformat(),
    }
