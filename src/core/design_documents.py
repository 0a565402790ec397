"""Design documents (view definitions) required by each database.

These are stored verbatim so rows stay compatible with existing databases.
"""

from __future__ import annotations

from typing import Any

DATA_DESIGN = "stats"
META_DESIGN = "metadata"

DATA_DESIGN_DOCUMENT: dict[str, Any] = {
    "_id": f"_design/{DATA_DESIGN}",
    "views": {
        "all_ratings": {
            "map": "function (doc) {\n  if(doc.type === 'rating') {\n emit(doc.data.offering_id, 1);}\n}",
        },
        "minmaxavg": {
            "map": (
                "function (doc) {\n  if (doc.type && doc.type === 'rating' && doc.data && doc.data.score "
                "&& !isNaN(doc.data.score)) {\n    emit(doc.data.offering_id, Number(doc.data.score));\n  }\n}"
            ),
            "reduce": "_stats",
        },
        "ratings_per_month": {
            "map": (
                "function (doc) {\n  if(doc.type && doc.type === 'rating' && doc.data && doc.created) { \n"
                "emit([doc.data.offering_id, doc.created.substr(0,7)], doc.data.score);}\n}"
            ),
            "reduce": "_stats",
        },
    },
    "language": "javascript",
}

META_DESIGN_DOCUMENT: dict[str, Any] = {
    "_id": f"_design/{META_DESIGN}",
    "views": {
        "auth_tokens": {
            "map": (
                "function (doc) {\n  if(doc.type && doc.type === 'token') {\n"
                "    emit(doc._id, [doc.user_name, doc.created]);\n  }\n}"
            ),
        },
        "expired_tokens": {
            "reduce": "_count",
            "map": (
                "function (doc) {\n  if(doc.type === 'token') {\n"
                "    var remaining = Math.floor(((1800 * 1000) - (new Date() - new Date(doc.created)))/60000);\n"
                "    if(remaining <= 0) {\n      emit(doc.user_name, doc.created);      \n    }\n  }\n}"
            ),
        },
        "domains_spec": {
            "reduce": "_count",
            "map": (
                'function (doc) {\n if(doc.type && doc.type === "domain") {\n  var entities = [];\n'
                "  for(var e in doc.entities) {\n  entities.push(doc.entities[e].name);\n }\n"
                "  emit(doc.domain_id, entities);    }\n}\n"
            ),
        },
        "tag_spec": {
            "map": (
                "function (doc) {\n  if(doc.type && doc.type === 'tags') {\n  var tags = [];\n"
                "   for(var t in doc.tags) {\n   tags.push(doc.tags[t].name);\n    }\n"
                "    emit(doc._id, tags.sort());  \n  }\n  \n}\n"
            ),
        },
        "score_spec": {
            "map": (
                "function (doc) {\n  if(doc._id === 'score_spec') {\n  var scores = [];\n"
                "   for(var s in doc.scores) {\n   scores.push(doc.scores[s].name);\n    }\n"
                "    emit(doc._id, scores.sort());  \n  }\n  \n}\n"
            ),
        },
    },
    "language": "javascript",
}
