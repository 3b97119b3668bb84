# registered accounts, the signed-in pointer and the owner gate
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from db.models import Account, from_records
from db.storage import Keys, Storage
from utils.config import OWNER_PASSPHRASE
from utils.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOwnerPassphraseError,
)
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class SignUpForm:
    name: str
    email: str
    phone: str
    address: str
    password: str

    def cleaned(self) -> SignUpForm:
        """Trim the text fields. The password is kept exactly as typed."""
        return dataclasses.replace(
            self,
            name=self.name.strip(),
            email=self.email.strip(),
            phone=self.phone.strip(),
            address=self.address.strip(),
        )

    @property
    def is_complete(self) -> bool:
        return all([self.name, self.email, self.phone, self.address, self.password])


class AccountBook:
    """
    Accounts plus the current session.

    States: anonymous (`current` is None) and authenticated. Sign-up and log-in
    move to authenticated; nothing moves back.

    With remember on, the current account and the remember flag are durable.
    With it off, the current account lives in session scope only.
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.current: Optional[Account] = None
        self.remembered: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    async def accounts(self) -> List[Account]:
        raw = await self.storage.read_durable(Keys.USERS, [])
        accounts = from_records(Account, raw)
        if accounts is None:
            _logger.warning("Stored account list is unreadable, treating as empty.")
            return []
        return accounts

    async def _read_current(self, durable: bool) -> Optional[Account]:
        if durable:
            raw = await self.storage.read_durable(Keys.CURRENT_USER)
        else:
            raw = await self.storage.read_session(Keys.CURRENT_USER)
        if raw is None:
            return None
        found = from_records(Account, [raw])
        return found[0] if found else None

    async def restore(self) -> Optional[Account]:
        """Pick up a remembered account, else a session one, else stay anonymous."""
        self.current = None
        self.remembered = bool(await self.storage.read_durable(Keys.REMEMBER))
        if self.remembered:
            self.current = await self._read_current(durable=True)
        if self.current is None:
            self.current = await self._read_current(durable=False)
        if self.current:
            _logger.info(f"Restored session for {self.current.email}.")
        return self.current

    async def _set_current(self, account: Account, remember: bool) -> None:
        self.current = account
        self.remembered = remember
        if remember:
            await self.storage.write_durable(Keys.CURRENT_USER, account.to_record())
            await self.storage.write_durable(Keys.REMEMBER, "1")
        else:
            await self.storage.remove(Keys.REMEMBER)
            await self.storage.write_session(Keys.CURRENT_USER, account.to_record())

    async def set_remember(self, remember: bool) -> None:
        """Apply the remember preference to the session already in place."""
        if self.current is not None:
            await self._set_current(self.current, remember)
            return
        self.remembered = remember
        if not remember:
            await self.storage.remove(Keys.REMEMBER)

    async def sign_up(
        self, form: SignUpForm, remember: bool, when: Optional[datetime] = None
    ) -> Account:
        accounts = await self.accounts()
        if any(a.email == form.email for a in accounts):
            raise DuplicateEmailError()

        when = when or datetime.now()
        account = Account(
            id=int(when.timestamp() * 1000),
            name=form.name,
            email=form.email,
            phone=form.phone,
            address=form.address,
            password=form.password,
        )
        accounts.append(account)
        await self.storage.write_durable(
            Keys.USERS, [a.to_record() for a in accounts]
        )
        await self._set_current(account, remember)
        _logger.info(f"Created account {account.email}.")
        return account

    async def log_in(self, email: str, password: str, remember: bool) -> Account:
        for account in await self.accounts():
            if account.email == email and account.password == password:
                await self._set_current(account, remember)
                _logger.info(f"Logged in {account.email}.")
                return account
        raise InvalidCredentialsError()


class OwnerGate:
    """
    One shared passphrase in front of the owner dashboard. A plain string
    comparison; the flag lives as long as this object and is never stored.
    """

    def __init__(self, passphrase: str = OWNER_PASSPHRASE) -> None:
        self._passphrase = passphrase
        self.authenticated = False

    def enter(self, attempt: str) -> bool:
        if attempt != self._passphrase:
            _logger.info("Owner gate: wrong passphrase.")
            raise InvalidOwnerPassphraseError()
        self.authenticated = True
        _logger.info("Owner gate: unlocked.")
        return True
