"""Render package descriptors as Homebrew Ruby formulae."""

import re

from .descriptor import PackageDescriptor


def formula_class_name(name: str) -> str:
    """Homebrew class name for a formula name.

    Example:
        >>> formula_class_name("iamcommitted")
        'Iamcommitted'
        >>> formula_class_name("foo-bar_baz")
        'FooBarBaz'
        >>> formula_class_name("python@3")
        'PythonAT3'
    """
    class_name = name[:1].upper() + name[1:].lower()
    class_name = re.sub(r"[-_.\s]([a-zA-Z0-9])", lambda m: m.group(1).upper(), class_name)
    class_name = class_name.replace("+", "x")
    return re.sub(r"(.)@(\d)", r"\1AT\2", class_name)


def _ruby_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")


def _ruby_string(value: str) -> str:
    """Double-quoted Ruby string literal without interpolation."""
    return f'"{_ruby_escape(value)}"'


def _heredoc_line(value: str) -> str:
    return value.replace("\\", "\\\\").replace("#{", "\\#{")


def render_formula(descriptor: PackageDescriptor) -> str:
    """Render a descriptor as a Homebrew formula.

    Args:
        descriptor: Descriptor to render

    Returns:
        Ruby source of the formula, ending with a newline
    """
    lines = [
        f"class {formula_class_name(descriptor.name)} < Formula",
        f"  desc {_ruby_string(descriptor.description)}",
        f"  homepage {_ruby_string(descriptor.homepage)}",
        f"  url {_ruby_string(descriptor.url)}",
        f"  sha256 {_ruby_string(descriptor.sha256)}",
        f"  version {_ruby_string(descriptor.version)}",
        f"  license {_ruby_string(descriptor.license)}",
        "",
        "  def install",
        f"    bin.install {_ruby_string(descriptor.binary)}",
        "  end",
        "",
        "  test do",
        # Ruby interpolation, not Python: #{version} and #{bin} are evaluated by brew
        f'    assert_match "{_ruby_escape(descriptor.binary)} #{{version}}", '
        f'shell_output("#{{bin}}/{_ruby_escape(descriptor.binary)} '
        f'{_ruby_escape(descriptor.version_flag)}")',
        "  end",
    ]

    caveats = descriptor.caveats().rstrip("\n")
    if caveats:
        lines += ["", "  def caveats", "    <<~EOS"]
        lines += [
            f"      {_heredoc_line(line)}" if line else "" for line in caveats.splitlines()
        ]
        lines += ["    EOS", "  end"]

    lines.append("end")
    return "\n".join(lines) + "\n"
