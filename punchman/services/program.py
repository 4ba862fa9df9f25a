"""Program policy - read-only reward thresholds."""

from django.core.exceptions import ValidationError

from punchman.conf import punchman_settings
from punchman.exceptions import PunchmanError
from punchman.models import LoyaltyProgram
from punchman.protocols.punch_cards import ProgramRequirements


class ProgramPolicy:
    """
    Loyalty program lookup for the punch engine.

    Uses @classmethod so the class itself satisfies the ProgramPolicy protocol.
    """

    @classmethod
    def get_requirements(cls, loyalty_program_id: str) -> ProgramRequirements:
        """
        Get the reward rule of an active program.

        Raises:
            PunchmanError: PROGRAM_NOT_FOUND if missing, inactive, or malformed id
        """
        try:
            program = LoyaltyProgram.objects.select_related("merchant").get(
                pk=loyalty_program_id,
                is_active=True,
            )
        except (LoyaltyProgram.DoesNotExist, ValidationError, ValueError):
            raise PunchmanError("PROGRAM_NOT_FOUND", loyalty_program_id=str(loyalty_program_id))

        return ProgramRequirements(
            loyalty_program_id=str(program.pk),
            merchant_id=str(program.merchant_id),
            required_punches=program.required_punches,
            reward_description=program.reward_description,
            shop_name=program.merchant.name,
            shop_address=program.merchant.address or punchman_settings.DEFAULT_SHOP_ADDRESS,
        )
