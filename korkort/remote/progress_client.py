"""
GraphQL client for the remote progress service.

Handles HTTP communication with the managed API that stores completed
lesson indices per user:
- getUserLessons: fetch completed indices
- addCompletedLesson: append one index
- deleteAllCompletedLessons: wipe a user's progress

No retries are attempted here; callers decide what a failure means.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

GET_USER_LESSONS = """
  query GetUserLessons($userId: ID!) {
    getUserLessons(userId: $userId) {
      userId
      completedLessonIndices
    }
  }
"""

ADD_COMPLETED_LESSON = """
  mutation AddCompletedLesson($userId: ID!, $lessonIndex: Int!) {
    addCompletedLesson(userId: $userId, lessonIndex: $lessonIndex) {
      userId
      completedLessonIndices
    }
  }
"""

DELETE_ALL_COMPLETED_LESSONS = """
  mutation DeleteAllCompletedLessons($userId: ID!) {
    deleteAllCompletedLessons(userId: $userId) {
      success
    }
  }
"""


class RemoteServiceError(Exception):
    """Raised when the remote progress service fails or returns GraphQL errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ProgressClient:
    """HTTP client for the remote progress GraphQL API."""

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the progress client.

        Args:
            api_url: GraphQL endpoint URL
            api_key: Bearer token for the user pool
            timeout_seconds: Request timeout
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Send one GraphQL document.

        Returns:
            The `data` object of the response

        Raises:
            RemoteServiceError: On transport failure, non-2xx status or GraphQL errors
        """
        try:
            response = await self.client.post(
                self.api_url,
                json={"query": query, "variables": variables},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"Progress service request failed: {e}") from e
        except ValueError as e:
            raise RemoteServiceError(f"Progress service returned invalid JSON: {e}") from e

        errors = payload.get("errors") or []
        data = payload.get("data")
        if errors:
            logger.debug("GraphQL errors: {}", errors)
            raise RemoteServiceError(
                "; ".join(err.get("message", "unknown error") for err in errors),
                errors=errors,
            )
        if data is None:
            raise RemoteServiceError("Progress service returned no data")
        return data

    async def get_completed_lessons(self, user_id: str) -> list[int]:
        """
        Fetch the completed lesson indices stored for a user.

        Returns:
            List of indices (empty if the user has no record)
        """
        data = await self._execute(GET_USER_LESSONS, {"userId": user_id})
        record = data.get("getUserLessons")
        if not record:
            logger.info("No completed lessons stored remotely for {}", user_id)
            return []
        return [int(i) for i in record.get("completedLessonIndices") or []]

    async def add_completed_lesson(self, user_id: str, lesson_index: int) -> list[int]:
        """
        Append one completed lesson for a user.

        Returns:
            The server's list of indices after the append

        Raises:
            RemoteServiceError: If the mutation returned null
        """
        data = await self._execute(
            ADD_COMPLETED_LESSON,
            {"userId": user_id, "lessonIndex": int(lesson_index)},
        )
        record = data.get("addCompletedLesson")
        if record is None:
            raise RemoteServiceError(f"addCompletedLesson returned null for {user_id}")
        return [int(i) for i in record.get("completedLessonIndices") or []]

    async def delete_all_completed_lessons(self, user_id: str) -> bool:
        """
        Delete every completed lesson stored for a user.

        Returns:
            The service's success flag
        """
        data = await self._execute(DELETE_ALL_COMPLETED_LESSONS, {"userId": user_id})
        record = data.get("deleteAllCompletedLessons") or {}
        return bool(record.get("success"))
