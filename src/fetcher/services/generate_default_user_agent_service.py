import platform

from mirror.core.managers.config_manager import config_manager


def generate_default_user_agent() -> str:
    """
    Returns the User-Agent sent to the upstream site.

    An explicit 'user_agent.value' from settings.json wins. Otherwise a generic
    Chrome user agent is built for the current operating system, using the
    version from 'user_agent.chrome_version'.

    Returns:
        str: The User-Agent string.
    """
    configured = config_manager.get_nested("user_agent.value")
    if configured:
        return str(configured)

    os_name = platform.system()

    if os_name == "Windows":
        os_part = "Windows NT 10.0; Win64; x64"
    elif os_name == "Darwin":  # macOS
        os_part = "Macintosh; Intel Mac OS X 10_15_7"
    elif os_name == "Linux":
        os_part = "X11; Linux x86_64"
    else:
        os_part = "Unknown OS"

    chrome_version = config_manager.get_nested("user_agent.chrome_version", "120.0.0.0")

    return (
        f"Mozilla/5.0 ({os_part}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{chrome_version} Safari/537.36"
    )
