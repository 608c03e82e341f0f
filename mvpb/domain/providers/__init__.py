from .stream_provider import StreamProvider
from .provider_factory import ProviderFactory
from .anthropic_provider import AnthropicProvider
from .claude_code_provider import ClaudeCodeProvider
from .replay_provider import ReplayProvider

# Register built-in providers
ProviderFactory.register("anthropic", AnthropicProvider)
ProviderFactory.register("claude-code", ClaudeCodeProvider)
ProviderFactory.register("replay", ReplayProvider)

__all__ = [
    "StreamProvider",
    "ProviderFactory",
    "AnthropicProvider",
    "ClaudeCodeProvider",
    "ReplayProvider",
]
