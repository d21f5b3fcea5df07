"""Service-layer error taxonomy.

Every failure a caller can see is a ``ServiceError`` subclass carrying the
HTTP status and a caller-safe message.  The exception handler in
``app.main`` renders them as ``{"success": false, "message": ...}``;
internal detail goes to the log, never to the response body.

``UserOrEnrollmentNotFound`` deliberately covers both "no such user" and
"no such enrollment on that user": the completion endpoint has always
answered both cases with the same 404, and clients depend on that.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# --- 400 ---------------------------------------------------------------


class InvalidRequest(ServiceError):
    status_code = 400
    message = "Invalid request"


# --- 404 ---------------------------------------------------------------


class NotFound(ServiceError):
    status_code = 404
    message = "Not found"


class UserNotFound(NotFound):
    message = "User not found"


class CourseNotFound(NotFound):
    message = "Course not found"


class UserOrEnrollmentNotFound(NotFound):
    message = "User or course not found"


class BlogNotFound(NotFound):
    message = "Blog not found"


class TestimonialNotFound(NotFound):
    message = "Testimonial not found"


# --- conflicts ---------------------------------------------------------


class Conflict(ServiceError):
    status_code = 409
    message = "Conflict"


class AlreadyEnrolled(Conflict):
    # Reported as 400 for compatibility with existing clients.
    status_code = 400
    message = "Already enrolled in this course"


class DuplicateEnrollment(AlreadyEnrolled):
    """Raised by the ledger when the slug is already on the user record."""


class CourseAlreadyExists(Conflict):
    message = "A course with this slug already exists"


class BlogAlreadyExists(Conflict):
    message = "A blog post with this slug already exists"


# --- credentials -------------------------------------------------------


class Unauthorized(ServiceError):
    status_code = 401
    message = "Authorization required"


class InvalidCredentials(ServiceError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    message = "Unauthorized"


# --- 500 ---------------------------------------------------------------


class InternalError(ServiceError):
    status_code = 500
    message = "Internal server error"


class EnrollmentWriteFailed(InternalError):
    message = "Failed to enroll in course"
