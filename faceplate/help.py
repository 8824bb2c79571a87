"""Usage text for faces and actions."""

from faceplate.models import ActionDescriptor, Face, OptionSpec
from faceplate.registry import FaceRegistry


def _option_usage(option: OptionSpec) -> str:
    flags = ', '.join(option.flags)
    if option.negatable:
        flags = ', '.join(f'--[no-]{flag[2:]}' if flag.startswith('--') else flag for flag in option.flags)
    if option.takes_argument:
        argument = f'[{option.argument}]' if option.optional_argument else option.argument
        flags = f'{flags} {argument}'
    return flags


def _options_block(options: tuple[OptionSpec, ...]) -> list[str]:
    if not options:
        return []
    usages = [_option_usage(option) for option in options]
    width = max(len(usage) for usage in usages) + 2
    lines = ['', 'OPTIONS:']
    for usage, option in zip(usages, options, strict=True):
        lines.append(f'  {usage.ljust(width)}{option.help or ""}'.rstrip())
    return lines


def face_help(face: Face) -> str:
    """Usage text listing a face's actions."""
    lines = [f'USAGE: faceplate {face.name} <action> [--option <value> ...]']
    if face.summary:
        lines += ['', face.summary]
    if face.description:
        lines += ['', face.description.strip()]

    lines += ['', 'ACTIONS:']
    width = max((len(action.name) for action in face.actions), default=0) + 2
    for action in face.actions:
        marker = ' (default)' if action.default else ''
        lines.append(f'  {action.name.ljust(width)}{action.summary or ""}{marker}'.rstrip())

    lines += _options_block(face.options)
    lines += ['', f"See 'faceplate help {face.name} <action>' for help on a specific action."]
    return '\n'.join(lines)


def action_help(face: Face, action: ActionDescriptor) -> str:
    """Usage text for one action."""
    positional = ' '.join(f'<arg{index + 1}>' for index in range(action.required_args))
    usage = f'USAGE: faceplate {face.name} {action.name} {positional}'.rstrip()
    lines = [usage]
    if action.summary:
        lines += ['', action.summary]
    lines += _options_block(face.action_options(action))
    return '\n'.join(lines)


def registry_help(registry: FaceRegistry) -> str:
    """Usage text listing every face."""
    lines = ['USAGE: faceplate <face> <action> [--option <value> ...]', '', 'AVAILABLE FACES:']
    width = max((len(name) for name in registry.names()), default=0) + 2
    for face in registry:
        lines.append(f'  {face.name.ljust(width)}{face.summary or ""}'.rstrip())
    return '\n'.join(lines)
