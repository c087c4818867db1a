"""Prometheus metrics for DocFlow.

Defines operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter

# Review transitions by requested action and outcome
document_transitions_total = Counter(
    "docflow_document_transitions_total",
    "Total document review transition requests",
    ["action", "result"]  # action: APPROVE|REJECT|SUBMIT, result: success|forbidden|invalid_state|conflict|not_found|error
)

# Uploads by initial status
documents_uploaded_total = Counter(
    "docflow_documents_uploaded_total",
    "Total documents uploaded",
    ["status"]  # status: DRAFTED|SUBMITTED
)

documents_deleted_total = Counter(
    "docflow_documents_deleted_total",
    "Total documents deleted by administrators",
)
