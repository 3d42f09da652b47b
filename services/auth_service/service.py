import structlog
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import DuplicateEmail, InvalidCredentials, UserNotFound
from shared.security.context import Role
from shared.security.jwt_handler import create_access_token

from .models import User
from .repository import UserRepository
from .schemas import LoginResponse, UserCreate, UserLogin, UserResponse

logger = structlog.get_logger(__name__)

# pbkdf2_sha256 hashes new passwords; bcrypt hashes still verify
_pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


class AuthService:

    @staticmethod
    def hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    async def register(db: AsyncSession, data: UserCreate, role: Role = Role.USER) -> User:
        if await UserRepository.email_registered(db, data.email):
            raise DuplicateEmail()
        user = User(
            name=data.name,
            email=data.email,
            hashed_password=AuthService.hash_password(data.password),
            age=data.age,
            address=data.address,
            phone=data.phone,
            role=role,
            cart=[],
        )
        try:
            user = await UserRepository.add_user(db, user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await db.rollback()
            raise DuplicateEmail()
        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> LoginResponse:
        user = await UserRepository.find_by_email(db, data.email)
        if not user or not AuthService.verify_password(data.password, user.hashed_password):
            logger.info("login_failed")
            raise InvalidCredentials()
        token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
        logger.info("login_succeeded", user_id=user.id)
        return LoginResponse(user=UserResponse.model_validate(user), token=token)

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
        user = await UserRepository.find_by_id(db, user_id)
        if not user:
            raise UserNotFound()
        return user
