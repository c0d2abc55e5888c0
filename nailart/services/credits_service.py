import logging
from typing import Optional

from ..config import Config
from ..models.user import Profile
from ..utils.exceptions import BackendError
from .supabase_client import NO_ROWS_CODE


async def initialize_credits(client, user_id: str, access_token: Optional[str] = None) -> int:
    """Creates the profile row for a new user with the free credits."""
    row = await client.insert(
        Config.PROFILES_TABLE,
        [{"id": user_id, "credits": Config.DEFAULT_CREDITS}],
        single=True,
        access_token=access_token,
    )
    profile = Profile.model_validate(row)
    logging.info(f"Initialized credits for user {user_id} with {profile.credits} credits.")
    return profile.credits


async def get_credit_balance(client, user_id: str, access_token: Optional[str] = None) -> int:
    """
    Retrieves the current credit balance for a user, creating the profile
    row on first access.

    Raises:
        BackendError: If the profile can be neither read nor created
        ValidationError: If the stored row is malformed (e.g. negative credits)
    """
    try:
        row = await client.select(
            Config.PROFILES_TABLE,
            columns="id,credits",
            filters={"id": user_id},
            single=True,
            access_token=access_token,
        )
    except BackendError as e:
        if e.code != NO_ROWS_CODE:
            raise
        logging.info(f"No profile for user {user_id}, creating one.")
        return await initialize_credits(client, user_id, access_token)

    return Profile.model_validate(row).credits


def has_sufficient_credits(balance: int, amount_needed: int = Config.GENERATION_COST) -> bool:
    return balance >= amount_needed and balance > 0


async def deduct_credits(client, user_id: str, current_balance: int, amount: int = Config.GENERATION_COST,
                         access_token: Optional[str] = None) -> int:
    """
    Writes the balance after a generation.

    The new value is computed from the balance the caller holds, so two
    concurrent debits for the same user can both read the same balance.

    Returns:
        The new balance
    """
    new_balance = current_balance - amount
    await client.update(
        Config.PROFILES_TABLE,
        {"credits": new_balance},
        filters={"id": user_id},
        access_token=access_token,
    )
    logging.info(f"Deducted {amount} credits from user {user_id}. New balance: {new_balance}")
    return new_balance
