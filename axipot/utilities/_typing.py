from typing import TypeVar

# Commonly used type annotations so that they do not need
# to be redefined elsewhere whenever they are used.
Instance = TypeVar("Instance")
