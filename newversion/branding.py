"""Package identity constants: single source of truth for version."""


class AppBranding:
    """Identity sent to the stores with every lookup."""

    APP_NAME = "newversion"
    VERSION = "0.2.0"

    @classmethod
    def user_agent(cls) -> str:
        return f"{cls.APP_NAME}/{cls.VERSION}"
