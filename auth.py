from fastapi import APIRouter, Depends
from dependencies import get_account_service, raise_for_error
from modules.accounts.schemas import AccountResponse, LoginRequest, SignupRequest, TokenResponse
from modules.accounts.service import AccountService

router = APIRouter(tags=["Auth"])

# SIGNUP
@router.post("/signup", response_model=AccountResponse, status_code=201)
async def signup(body: SignupRequest, accounts: AccountService = Depends(get_account_service)):
    account, err = await accounts.signup(body.username, body.email, body.password)
    raise_for_error(err)
    return account

# LOGIN
@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    token, err = await accounts.login(
        username=body.username,
        email=body.email,
        password=body.password
    )
    raise_for_error(err)
    return {"token": token, "token_type": "bearer"}
