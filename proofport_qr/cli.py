"""
Command-line interface for the QR symbol encoder.
"""

import logging
import sys

import click

from proofport_qr import __version__
from proofport_qr.exceptions import QRCodeError
from proofport_qr.modes import shift_jis_code
from proofport_qr.render import RenderOptions, save, to_svg, to_terminal
from proofport_qr.symbol import create
from proofport_qr.tables import LEVELS


def _build(text, level, version, mask, kanji):
    try:
        return create(
            text,
            version=version,
            error_correction=level,
            mask_pattern=mask,
            to_sjis=shift_jis_code if kanji else None,
        )
    except QRCodeError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Log encoder decisions to stderr')
def main(verbose):
    """
    Encode text into QR code symbols.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )


@main.command()
@click.argument('text')
@click.option(
    '--level', '-l',
    type=click.Choice(LEVELS, case_sensitive=False),
    default='M',
    help='Error correction level'
)
@click.option('--version', 'version', type=click.IntRange(1, 40), help='Force symbol version')
@click.option('--mask', type=click.IntRange(0, 7), help='Force mask pattern')
@click.option(
    '--format', 'fmt',
    type=click.Choice(['terminal', 'svg', 'png'], case_sensitive=False),
    default='terminal',
    help='Output format'
)
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file path')
@click.option('--width', type=click.IntRange(min=1), default=300, help='Output width in pixels')
@click.option('--margin', type=click.IntRange(min=0), default=2, help='Quiet zone in modules')
@click.option('--dark', default='#000000', help='Foreground color')
@click.option('--light', default='#ffffff', help='Background color')
@click.option('--kanji', is_flag=True, help='Enable kanji mode (Shift JIS)')
def encode(text, level, version, mask, fmt, output, width, margin, dark, light, kanji):
    """Encode TEXT and print or save the symbol."""
    symbol = _build(text, level, version, mask, kanji)

    try:
        options = RenderOptions(width=width, margin=margin, dark_color=dark, light_color=light)
        if output:
            path = save(symbol, output, 'txt' if fmt == 'terminal' else fmt, options)
            click.echo(f"Saved version {symbol.version}-{symbol.error_correction} QR code to {path}")
        elif fmt == 'svg':
            click.echo(to_svg(symbol, options), nl=False)
        elif fmt == 'png':
            raise click.UsageError('PNG output needs --output')
        else:
            click.echo(to_terminal(symbol, margin))
    except QRCodeError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.argument('text')
@click.option(
    '--level', '-l',
    type=click.Choice(LEVELS, case_sensitive=False),
    default='M',
    help='Error correction level'
)
@click.option('--version', 'version', type=click.IntRange(1, 40), help='Force symbol version')
@click.option('--kanji', is_flag=True, help='Enable kanji mode (Shift JIS)')
def info(text, level, version, kanji):
    """Show how TEXT would be encoded."""
    symbol = _build(text, level, version, None, kanji)

    click.echo(f"Version:          {symbol.version} ({symbol.size}x{symbol.size})")
    click.echo(f"Error correction: {symbol.error_correction}")
    click.echo(f"Mask pattern:     {symbol.mask_pattern}")
    click.echo("Segments:")
    for seg in symbol.segments:
        click.echo(f"  {seg.mode.name:<12} length={seg.length:<5} bits={seg.bit_length}")


if __name__ == '__main__':
    main()
