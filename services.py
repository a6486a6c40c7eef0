"""
Business logic for users, videos and contact submissions.

Every service is built around a ``Database`` instance and converts
store failures into ``errors.StoreError`` after logging them.
"""

import logging
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError, PyMongoError

from database import Database
from errors import AgeTooHigh, AgeTooLow, DuplicateNickname, MissingField, NotFoundError, StoreError
from schemas import Contact, ContactRequest, RegisterRequest, User, Video

logger = logging.getLogger(__name__)

MIN_AGE = 8
MAX_AGE = 16
DEFAULT_CARTOON = "default"


class UserService:
    """Registration and nickname login.

    Login is an identity lookup only: anyone who knows an existing
    nickname is let in.  There is no credential to verify.
    """

    collection = "user"

    def __init__(self, store: Database):
        self.store = store

    def register(self, payload: RegisterRequest) -> User:
        if payload.age < MIN_AGE:
            raise AgeTooLow()
        if payload.age > MAX_AGE:
            raise AgeTooHigh()

        name = payload.name or payload.username
        nickname = payload.nickname or payload.username
        if not name or not nickname:
            raise MissingField("name and nickname (or username) are required")

        user = User(
            name=name,
            age=payload.age,
            nickname=nickname,
            cartoon=payload.cartoon or DEFAULT_CARTOON,
        )
        try:
            if self.store.find_one(self.collection, {"nickname": nickname}):
                raise DuplicateNickname()
            # The unique index catches a concurrent registration that
            # passed the lookup above.
            self.store.create_document(self.collection, user.model_dump(exclude_none=True))
        except DuplicateKeyError:
            raise DuplicateNickname()
        except PyMongoError as e:
            logger.exception("Error during user registration")
            raise StoreError("Failed to register user") from e

        logger.info("Registered user %s", nickname)
        return user

    def authenticate(self, nickname: str) -> datetime:
        """Look up a user by nickname and record the login time.

        Returns the new ``last_login_date``.  Raises ``NotFoundError``
        for an unknown nickname.
        """
        now = datetime.now(timezone.utc)
        try:
            matched = self.store.update_one(self.collection, {"nickname": nickname}, {"last_login_date": now})
        except PyMongoError as e:
            logger.exception("Error during nickname authentication")
            raise StoreError("Failed to authenticate") from e
        if not matched:
            raise NotFoundError("Invalid nickname")
        logger.info("User %s logged in", nickname)
        return now


class VideoService:
    collection = "video"

    def __init__(self, store: Database):
        self.store = store

    def submit(self, url: str) -> str:
        video = Video(url=url)
        try:
            return self.store.create_document(self.collection, video)
        except PyMongoError as e:
            logger.exception("Error during video posting")
            raise StoreError("Failed to post video") from e

    def fetch(self) -> Video:
        """Return one stored video.

        No ordering is applied, so with several videos stored any of them
        may come back.
        """
        try:
            doc = self.store.find_one(self.collection)
        except PyMongoError as e:
            logger.exception("Error fetching video URL")
            raise StoreError("Internal Server Error") from e
        if not doc:
            raise NotFoundError("Video not found")
        url = doc.get("url")
        if not isinstance(url, str):
            logger.error("Video %s has no usable url field", doc.get("_id"))
            raise StoreError("Internal Server Error")
        return Video(url=url)


class ContactService:
    collection = "contact"

    def __init__(self, store: Database):
        self.store = store

    def submit(self, payload: ContactRequest) -> str:
        contact = Contact(**payload.model_dump())
        try:
            return self.store.create_document(self.collection, contact)
        except PyMongoError as e:
            logger.exception("Error saving contact submission")
            raise StoreError("An error occurred") from e
