"""
Common utility functions for shapegen.
"""

# pylint: disable=line-too-long

import os
import re

import jinja2


def pascal(string):
    """
    Convert a string to PascalCase from snake_case, camelCase, or PascalCase.
    The string can contain dots, which are preserved in the output.
    Underscores at the beginning of the string are preserved in the output, but
    underscores in the middle of the string are removed.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if '.' in string:
        strings = string.split('.')
        return '.'.join(pascal(s) for s in strings)
    if not string or len(string) == 0:
        return string
    words = []
    startswith_under = string[0] == '_'
    if '_' in string:
        # snake_case
        words = re.split(r'_', string)
    elif string[0].isupper():
        # PascalCase
        words = re.findall(r'[A-Z][a-z0-9_]*\.?', string)
    else:
        # camelCase
        words = re.findall(r'[a-z0-9]+\.?|[A-Z][a-z0-9_]*\.?', string)
    result = ''.join(word.capitalize() for word in words)
    if startswith_under:
        result = '_' + result
    return result


def to_type_name(name: str) -> str:
    """Convert an arbitrary key into a PascalCase type name."""
    val = pascal(re.sub(r'[^a-zA-Z0-9_]', '_', name).strip('_'))
    if not val:
        return '_'
    if re.match(r'^[0-9]', val):
        val = '_' + val
    return val


def is_identifier(name: str) -> bool:
    """Check whether a key can be written as a bare property name."""
    return re.match(r'^[A-Za-z_$][A-Za-z0-9_$]*$', name) is not None


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the file, relative to the package directory.
        kvargs: The values to use as input for the template.

    Returns:
        str: The processed template as a string.
    """
    # Load the template environment
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)
    template_env.filters['pascal'] = pascal

    # Load the template from the file
    template = template_env.get_template(file_path)

    # Render the template with the object as input
    output = template.render(**kvargs)

    return output


def write_output(output: str, content: str):
    """
    Write generated content to a file, creating the directory if needed.

    Args:
        output (str): The output file path.
        content (str): The content to write.
    """
    output_dir = os.path.dirname(output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        f.write(content)
