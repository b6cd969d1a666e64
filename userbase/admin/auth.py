import secrets

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from userbase.core.settings import Settings

SESSION_KEY = "admin_user"


class AdminAuth(AuthenticationBackend):
    """SQLAdmin login against the configured admin credentials.

    The logged-in state lives in the Starlette session signed with
    SESSION_SECRET_KEY.
    """

    def __init__(self, settings: Settings) -> None:
        super().__init__(secret_key=settings.session_secret_key)
        self.username = settings.admin_username
        self.password = settings.admin_password

    def check_credentials(self, username: str, password: str) -> bool:
        # Both comparisons run so timing does not reveal which one failed.
        username_ok = secrets.compare_digest(username.strip(), self.username)
        password_ok = secrets.compare_digest(password, self.password)
        return username_ok and password_ok

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username", ""))
        if not self.check_credentials(username, str(form.get("password", ""))):
            return False
        request.session[SESSION_KEY] = username.strip()
        return True

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get(SESSION_KEY))
