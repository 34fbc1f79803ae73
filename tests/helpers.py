from loanapi.auth import create_access_token
from loanapi.models import Role
from loanapi.policy import RequestContext

PASSWORD = "strongpassword"


def regular(user_id):
    return RequestContext(requester_id=user_id, role=Role.REGULAR_USER)


def accountant(user_id=20):
    return RequestContext(requester_id=user_id, role=Role.ACCOUNTANT)


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}
