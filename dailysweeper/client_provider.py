import os
import pathlib
import platform
from temporalio.client import Client
from temporalio.envconfig import ClientConfig


# Task queue shared by the HTTP server (which starts session workflows) and
# the worker (which runs them).
TASK_QUEUE = os.getenv("MINESWEEPER_TASK_QUEUE", "minesweeper-task-queue")


# Configures and returns a Temporal Client. This uses the default
# settings, unless the TEMPORAL_PROFILE environment variable is set,
# in which case it configures it as per the specified profile name.
async def get_temporal_client() -> Client:
    config_file_path = get_config_file_path()
    profile_name = os.getenv("TEMPORAL_PROFILE")
    if profile_name and config_file_path.is_file():
        connect_config = ClientConfig.load_client_connect_config(
            profile=profile_name,
            config_file=str(config_file_path),
        )
        return await Client.connect(**connect_config)
    return await Client.connect(
        os.getenv("TEMPORAL_ADDRESS", "localhost:7233"),
        namespace=os.getenv("TEMPORAL_NAMESPACE", "default"),
    )


# Returns the path of the Temporal config file for this OS.
def get_config_file_path() -> pathlib.Path:
    home = pathlib.Path.home()
    system = platform.system()

    if system == "Darwin":
        return home / "Library/Application Support/temporalio/temporal.toml"
    if system == "Windows":
        app_data = os.getenv("AppData")
        if app_data is None:
            raise RuntimeError("AppData environment variable not set")
        return pathlib.Path(app_data) / "temporalio/temporal.toml"

    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    if xdg_config_home:
        return pathlib.Path(xdg_config_home) / "temporalio/temporal.toml"
    return home / ".config/temporalio/temporal.toml"
