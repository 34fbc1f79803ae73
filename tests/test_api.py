from jose import jwt

from loanapi import config
from loanapi.models import Loan, LoanStatus, Role, User

from helpers import PASSWORD, bearer

LOAN = {"loan_type": "Insurance", "amount": 10000, "currency": "EUR", "loan_period": 12}


def _register(client, username="johndoe", role="RegularUser"):
    return client.post(
        "/api/loan/addUser",
        json={
            "first_name": "John",
            "last_name": "Doe",
            "username": username,
            "password": "strongpassword",
            "age": 30,
            "salary": 2500,
            "role": role,
        },
    )


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_register_login_and_request_a_loan(client, db):
    response = _register(client)
    assert response.status_code == 200
    assert response.json() == {"message": "User added successfully!"}

    response = client.post("/api/loan/login", json={"username": "johndoe", "password": "strongpassword"})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    response = client.post("/api/loan/addLoan", json=LOAN, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Loan added successfully!"}

    response = client.get("/api/loan/loans", headers=headers)
    assert response.status_code == 200
    [loan] = response.json()
    assert loan["status"] == "InProgress"
    assert loan["loan_type"] == "Insurance"

    profile = client.get("/api/loan/users/getCurrentUserInfo", headers=headers).json()
    assert profile["username"] == "johndoe"
    assert profile["is_blocked"] is False
    assert "password_hash" not in profile
    assert [l["id"] for l in profile["loans"]] == [loan["id"]]


def test_duplicate_registration_is_conflict(client):
    assert _register(client).status_code == 200

    response = _register(client)

    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


def test_invalid_registration_is_bad_request(client):
    response = client.post("/api/loan/addUser", json={"first_name": "J", "username": "abc"})

    assert response.status_code == 400
    assert "User Name Is Required" in response.json()["detail"]
    assert "; " in response.json()["detail"]


def test_malformed_body_is_bad_request(client, make_user):
    user = make_user(1)

    response = client.post("/api/loan/addLoan", json={**LOAN, "amount": "lots"}, headers=bearer(user))

    assert response.status_code == 400
    assert "amount" in response.json()["detail"]


def test_wrong_password_is_unauthorized(client, make_user):
    make_user(1, username="username")

    response = client.post("/api/loan/login", json={"username": "username", "password": "wrongpassword"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


def test_missing_or_bad_token_is_unauthorized(client):
    assert client.get("/api/loan/loans").status_code == 401
    response = client.get("/api/loan/loans", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_regular_user_without_loans_gets_404(client, make_user):
    user = make_user(3)

    response = client.get("/api/loan/loans", headers=bearer(user))

    assert response.status_code == 404
    assert response.json()["detail"] == "No loans found for this user."


def test_blocked_user_cannot_request_loan(client, make_user, db):
    user = make_user(1, is_blocked=True)

    response = client.post("/api/loan/addLoan", json=LOAN, headers=bearer(user))

    assert response.status_code == 403
    assert db.query(Loan).count() == 0


def test_accountant_only_routes(client, make_user):
    user = make_user(1)
    boss = make_user(2, role=Role.ACCOUNTANT)

    assert client.get("/api/loan/users", headers=bearer(user)).status_code == 403
    assert client.get("/api/loan/users/1", headers=bearer(user)).status_code == 403
    assert client.put("/api/loan/users/changeStatus/1?isBlocked=true", headers=bearer(user)).status_code == 403

    response = client.get("/api/loan/users", headers=bearer(boss))
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [1, 2]

    assert client.get("/api/loan/users/1", headers=bearer(boss)).json()["username"] == "username1"
    assert client.get("/api/loan/users/99", headers=bearer(boss)).status_code == 404


def test_accountant_blocks_user(client, make_user, db):
    make_user(1)
    boss = make_user(2, role=Role.ACCOUNTANT)

    response = client.put("/api/loan/users/changeStatus/1?isBlocked=true", headers=bearer(boss))

    assert response.status_code == 200
    assert response.json() == {"message": "Successfully Updated The User Status"}
    db.expire_all()
    assert db.query(User).filter(User.id == 1).one().is_blocked is True

    missing = client.put("/api/loan/users/changeStatus/99?isBlocked=false", headers=bearer(boss))
    assert missing.status_code == 404


def test_loan_review_flow(client, make_user, make_loan, db):
    owner = make_user(12)
    boss = make_user(20, role=Role.ACCOUNTANT)
    make_loan(12, loan_id=1)
    update = {"loan_type": "Auto", "amount": 20000, "currency": "USD", "loan_period": 24}

    # accountant must say what the new status is
    response = client.put("/api/loan/loans/updateLoan/1", json=update, headers=bearer(boss))
    assert response.status_code == 400

    response = client.put("/api/loan/loans/updateLoan/1", json={**update, "status": "Approved"}, headers=bearer(boss))
    assert response.status_code == 200
    assert response.json() == {"message": "Successfully updated loan with id 1."}

    # approved: owner can no longer touch it
    assert client.put("/api/loan/loans/updateLoan/1", json=update, headers=bearer(owner)).status_code == 403
    response = client.delete("/api/loan/loans/deleteLoan/1", headers=bearer(owner))
    assert response.status_code == 403
    assert response.json()["detail"] == "You cannot delete loan that is approved or declined."

    assert client.get("/api/loan/loans/1", headers=bearer(owner)).json()["status"] == "Approved"

    assert client.delete("/api/loan/loans/deleteLoan/1", headers=bearer(boss)).status_code == 200
    db.expire_all()
    assert db.query(Loan).count() == 0


def test_other_users_loan_is_forbidden(client, make_user, make_loan):
    make_user(12)
    stranger = make_user(13)
    make_loan(12, loan_id=1)

    assert client.get("/api/loan/loans/1", headers=bearer(stranger)).status_code == 403
    assert client.delete("/api/loan/loans/deleteLoan/1", headers=bearer(stranger)).status_code == 403
    assert client.get("/api/loan/loans/2", headers=bearer(stranger)).status_code == 404


def test_user_deletes_own_account(client, make_user, make_loan, db):
    user = make_user(1)
    make_user(2)
    make_loan(1, loan_id=1, status=LoanStatus.DECLINED)

    assert client.delete("/api/loan/users/deleteUser/2", headers=bearer(user)).status_code == 403

    response = client.delete("/api/loan/users/deleteUser/1", headers=bearer(user))
    assert response.status_code == 200
    assert response.json() == {"message": "Successfully deleted user with id 1"}
    db.expire_all()
    assert db.query(User).count() == 1
    assert db.query(Loan).count() == 0


def test_login_token_works_with_password(client, make_user):
    make_user(5, username="accountant5", role=Role.ACCOUNTANT)

    response = client.post("/api/loan/login", json={"username": "accountant5", "password": PASSWORD})
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    assert client.get("/api/loan/users", headers=headers).status_code == 200


def test_nan_amount_is_bad_request(client, make_user, db):
    user = make_user(1)
    body = '{"loan_type": "Auto", "amount": NaN, "currency": "USD", "loan_period": 3}'

    response = client.post(
        "/api/loan/addLoan",
        content=body,
        headers={**bearer(user), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Please Indicate The Amount > 1000"
    assert db.query(Loan).count() == 0


def test_token_with_unknown_role_is_unauthorized(client, make_user, make_loan):
    make_user(1)
    make_loan(1, loan_id=1)
    token = jwt.encode({"sub": "99", "role": "Admin"}, config.SECRET_KEY, algorithm=config.ALGORITHM)
    headers = {"Authorization": f"Bearer {token}"}

    response = client.delete("/api/loan/loans/deleteLoan/1", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Unrecognized role"
    assert client.get("/api/loan/loans", headers=headers).status_code == 401
