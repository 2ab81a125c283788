"""Classification of identity and data service failures.

Both classifiers work in two tiers:

1. Structured: the provider's error code, when one is present.
2. Fallback: case-insensitive substring matching on the provider message.

The fallback tier is a heuristic. It breaks if the provider rewords its
messages, which is why the profile fallback can be turned off through
ProvisioningSettings.message_fallback_enabled.
"""

from typing import Any

from ..errors import (
    DataServiceFailure,
    DuplicateEmailError,
    IdentityServiceError,
    IdentityServiceFailure,
    ProfileConflictError,
    ProfileUpdateError,
    ProvisioningError,
    WeakPasswordError,
)

# PostgreSQL unique_violation
UNIQUE_VIOLATION_CODE = "23505"

# Auth error codes sent by newer identity service releases
DUPLICATE_EMAIL_CODES = frozenset({"email_exists", "user_already_exists"})
WEAK_PASSWORD_CODES = frozenset({"weak_password"})

USERNAME_CONSTRAINT = "profiles_username_key"
EMAIL_CONSTRAINT = "profiles_email_key"

# User-facing messages (the admin console is French-speaking)
DUPLICATE_EMAIL_MESSAGE = "Cette adresse e-mail est déjà utilisée par un autre compte."
WEAK_PASSWORD_MESSAGE = "Le mot de passe doit contenir au moins 6 caractères."
USERNAME_TAKEN_MESSAGE = "Échec de la mise à jour du profil : ce nom d'utilisateur est déjà pris."
PROFILE_EMAIL_TAKEN_MESSAGE = (
    "Échec de la mise à jour du profil : cette adresse e-mail est déjà prise dans les profils."
)
UNIQUE_VALUE_TAKEN_MESSAGE = (
    "Échec de la mise à jour du profil : une valeur unique est déjà utilisée (code 23505)."
)
BY_MESSAGE_SUFFIX = " (par message)"


def _contains(text: Any, *needles: str) -> bool:
    if not text:
        return False
    lowered = str(text).lower()
    return any(needle in lowered for needle in needles)


# ==================== IDENTITY SERVICE ====================


def classify_identity_error(error: IdentityServiceFailure) -> ProvisioningError:
    """
    Classify an identity creation failure.

    Args:
        error: Failure raised by the identity provider

    Returns:
        DuplicateEmailError (409), WeakPasswordError (400) or
        IdentityServiceError (provider status, else 400)
    """
    details = error.to_dict()
    message = error.message or ""

    if error.code in DUPLICATE_EMAIL_CODES or (
        _contains(message, "unique constraint") and _contains(message, "email")
    ):
        return DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE, details=details)

    if error.code in WEAK_PASSWORD_CODES or _contains(
        message, "password should be at least 6 characters"
    ):
        return WeakPasswordError(WEAK_PASSWORD_MESSAGE, details=details)

    return IdentityServiceError(
        f"Auth error: {message}",
        status_code=error.status or 400,
        details=details,
    )


# ==================== DATA SERVICE ====================


def _partial_failure_details(error: DataServiceFailure, user_id: str) -> dict:
    return {
        **error.to_dict(),
        "user_id": user_id,
        "identity_created": True,
        "profile_updated": False,
        "note": "The auth identity was created but its profile update failed; "
        "the identity was not rolled back.",
    }


def classify_profile_error(
    error: DataServiceFailure,
    user_id: str,
    message_fallback: bool = True,
) -> ProvisioningError:
    """
    Classify a profile update failure that followed a successful identity creation.

    Priority:
    a. unique_violation code: sub-classify by constraint (username, email, other)
    b. no code: match "unique constraint" plus constraint markers in the message
    c. any other code: generic message carrying the code, provider status else 500
    d. otherwise: generic message, 500

    Every returned error documents that the identity exists but its profile
    was not updated, and carries the raw provider error.

    Args:
        error: Failure raised by the profile store
        user_id: ID of the identity created earlier in the request
        message_fallback: Enable tier (b)

    Returns:
        ProfileConflictError (409) or ProfileUpdateError
    """
    details = _partial_failure_details(error, user_id)
    code = str(error.code) if error.code is not None else None

    if code == UNIQUE_VIOLATION_CODE:
        if _contains(error.message, USERNAME_CONSTRAINT) or _contains(error.details, "username"):
            message = USERNAME_TAKEN_MESSAGE
        elif _contains(error.message, EMAIL_CONSTRAINT) or _contains(error.details, "email"):
            message = PROFILE_EMAIL_TAKEN_MESSAGE
        else:
            message = UNIQUE_VALUE_TAKEN_MESSAGE
        return ProfileConflictError(message, details=details)

    if not code and message_fallback and _contains(error.message, "unique constraint"):
        if _contains(error.message, USERNAME_CONSTRAINT, "username"):
            return ProfileConflictError(USERNAME_TAKEN_MESSAGE + BY_MESSAGE_SUFFIX, details=details)
        if _contains(error.message, EMAIL_CONSTRAINT, "email"):
            return ProfileConflictError(
                PROFILE_EMAIL_TAKEN_MESSAGE + BY_MESSAGE_SUFFIX, details=details
            )

    if code:
        return ProfileUpdateError(
            f"Erreur de mise à jour du profil: {error.message} (Code: {code})",
            status_code=error.status or 500,
            details=details,
        )

    return ProfileUpdateError(
        "Erreur lors de la mise à jour du profil: "
        f"{error.message or 'Erreur inconnue'}. "
        "L'utilisateur a été créé dans l'authentification mais la mise à jour du profil a échoué.",
        status_code=500,
        details=details,
    )
