# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Errors raised when a terminology request cannot be satisfied.

Both kinds are caller-input errors: they are raised where they are detected
and are never retried. `to_operation_outcome` renders them the way a FHIR
server reports a bad request.
"""
from typing import Any, Dict


class TerminologyError(ValueError):
    """Base class for terminology lookup and filter failures."""

    # FHIR IssueType reported in the OperationOutcome
    code = "invalid"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_operation_outcome(self) -> Dict[str, Any]:
        return {
            "resourceType": "OperationOutcome",
            "issue": [{
                "severity": "error",
                "code": self.code,
                "details": {"text": self.message},
            }],
        }


class NotFoundError(TerminologyError):
    """No stored resource matches the requested resource type and URL."""
    code = "not-found"

    def __init__(self, resource_type: str, url: str):
        super().__init__(f"{resource_type} {url} not found", resource_type=resource_type, url=url)


class InvalidFilterError(TerminologyError):
    """A hierarchy operation was requested on a code system that does not support it."""
    code = "invalid"
