import functools
import logging

from django.conf import settings
from django.contrib.auth import authenticate, logout
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core import signing
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import DatabaseError
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .auth import ACCESS_SALT, REFRESH_SALT, user_from_token
from .errors import ValidationError, WorkoutError
from .recurrence import consecutive_dates, normalize_date, shift_week, week_dates
from .serializers import WorkoutSerializer
from .services.accounts import auth_payload, request_password_reset, user_for_reset_token, user_payload
from .services.workouts import (
    create_workout,
    delete_occurrence,
    delete_series,
    get_workout,
    list_workouts,
    update_workout,
    week_plan,
)

logger = logging.getLogger(__name__)

WEAK_PASSWORD = "Password is not strong enough"


def _workout_errors(**actions: str):
    """Map workout errors to their payloads; ``actions`` labels each HTTP method."""

    def decorator(view):
        @functools.wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except WorkoutError as exc:
                return Response(exc.payload(), status=exc.status_code)
            except DatabaseError:
                action = actions.get(request.method, "process workout request")
                logger.exception("Failed to %s", action)
                return Response({"error": f"Unable to {action}"}, status=500)

        return wrapper

    return decorator


def _date_param(request, name: str):
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return None
    day = normalize_date(raw)
    if day is None:
        raise ValidationError([name], [{"field": name, "message": "Must be a valid date"}])
    return day


def _int_param(request, name: str, default: int = 0) -> int:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError([name], [{"field": name, "message": "Must be a whole number"}]) from None


def _password_error(password: str, user: User):
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        return Response({"error": WEAK_PASSWORD, "details": exc.messages}, status=400)
    return None


@api_view(["GET"])
@permission_classes([AllowAny])
def health(_):
    return Response({"status": "ok", "time": timezone.now().isoformat()})


@api_view(["POST"])
@permission_classes([AllowAny])
def signup_view(request):
    email = str(request.data.get("email") or "").strip().lower()
    password = request.data.get("password") or ""
    if not email or not password:
        return Response({"error": "All fields must be filled"}, status=400)
    try:
        validate_email(email)
    except DjangoValidationError:
        return Response({"error": "Email is not valid"}, status=400)
    if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
        return Response({"error": "Email already in use"}, status=400)
    rejected = _password_error(password, User(username=email, email=email))
    if rejected:
        return rejected
    user = User.objects.create_user(username=email, email=email, password=password)
    return Response(auth_payload(user), status=201)


@api_view(["POST"])
@permission_classes([AllowAny])
def login_view(request):
    email = str(request.data.get("email") or request.data.get("username") or "").strip()
    password = request.data.get("password") or ""
    if not email or not password:
        return Response({"error": "All fields must be filled"}, status=400)
    username = email
    email_user = User.objects.filter(email__iexact=email).first()
    if email_user:
        username = email_user.username
    user = authenticate(username=username, password=password)
    if not user:
        return Response({"error": "Incorrect email or password"}, status=400)
    return Response(auth_payload(user))


@api_view(["POST"])
@permission_classes([AllowAny])
def refresh_view(request):
    token = request.data.get("refresh")
    if not token:
        return Response({"error": "Refresh token required"}, status=400)
    try:
        user = user_from_token(token, salt=REFRESH_SALT, max_age=settings.REFRESH_TOKEN_TTL_SECONDS)
    except (signing.BadSignature, ValueError, User.DoesNotExist):
        return Response({"error": "Invalid or expired refresh token"}, status=401)
    access = signing.TimestampSigner(salt=ACCESS_SALT).sign(str(user.id))
    return Response({"access": access})


@api_view(["POST"])
def logout_view(request):
    logout(request)
    return Response({"ok": True})


@api_view(["GET"])
def me_view(request):
    return Response({"user": user_payload(request.user)})


@api_view(["POST"])
@permission_classes([AllowAny])
def forgot_password_view(request):
    email = str(request.data.get("email") or "").strip()
    try:
        validate_email(email)
    except DjangoValidationError:
        return Response({"error": "Please provide a valid email address"}, status=400)
    request_password_reset(email)
    # Same answer either way so the endpoint can't be used to probe for accounts.
    return Response({"message": "If an account exists for that email, a reset link has been sent"})


@api_view(["POST"])
@permission_classes([AllowAny])
def reset_password_view(request, token):
    password = request.data.get("password") or ""
    if not password:
        return Response({"error": "A new password is required"}, status=400)
    user = user_for_reset_token(token)
    if user is None:
        return Response({"error": "Reset link is invalid or has expired"}, status=400)
    rejected = _password_error(password, user)
    if rejected:
        return rejected
    user.set_password(password)
    user.save(update_fields=["password"])
    return Response(auth_payload(user))


@api_view(["GET", "POST"])
@_workout_errors(GET="fetch workouts", POST="create workout")
def workouts(request):
    if request.method == "POST":
        definition = create_workout(request.user, request.data)
        return Response(WorkoutSerializer(definition).data, status=201)
    rows = list_workouts(request.user, request.query_params.get("day"))
    return Response(WorkoutSerializer(rows, many=True).data)


@api_view(["GET", "PATCH", "DELETE"])
@_workout_errors(GET="fetch workout", PATCH="update workout", DELETE="delete workout")
def workout_detail(request, pk):
    if request.method == "PATCH":
        definition = update_workout(request.user, pk, request.data)
    elif request.method == "DELETE":
        definition = delete_series(request.user, pk)
    else:
        definition = get_workout(request.user, pk)
    return Response(WorkoutSerializer(definition).data)


@api_view(["POST"])
@_workout_errors(POST="delete workout")
def workout_occurrences(request, pk):
    scope, definition = delete_occurrence(request.user, pk, request.data)
    return Response({"scope": scope, "workout": WorkoutSerializer(definition).data})


def _out_of_range(name: str) -> ValidationError:
    return ValidationError([name], [{"field": name, "message": "Date is out of range"}])


def _requested_week(request) -> tuple:
    start = _date_param(request, "start")
    if start is not None:
        try:
            week = consecutive_dates(start, 7)
        except OverflowError:
            raise _out_of_range("start") from None
    else:
        anchor = _date_param(request, "date") or timezone.now().date()
        try:
            week = week_dates(anchor)
        except OverflowError:
            raise _out_of_range("date") from None
    offset = _int_param(request, "offset")
    if not offset:
        return week
    try:
        return shift_week(week, offset)
    except OverflowError:
        raise _out_of_range("offset") from None


@api_view(["GET"])
@_workout_errors(GET="fetch workouts")
def workout_week(request):
    week = _requested_week(request)
    return Response(week_plan(request.user, week))
