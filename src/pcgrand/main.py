# -*- encoding: utf-8 -*-
#
# The MIT License (MIT)
#
# Copyright © 2021 Maurizio Tomasi
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation the
# rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software. THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT
# LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT
# SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
# CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.


from itertools import islice
import logging
import sys

from pcgrand.engine import PcgEngine
from pcgrand.errors import CompatibilityError, InvalidPcgData, UnsupportedOperationError
from pcgrand.presets import PRESETS, preset
from pcgrand.seeds import Seed
from pcgrand.serialization import deserialize, serialize

import click

GENERATORS = sorted(PRESETS)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Print debugging messages")
def cli(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def seed_options(func):
    """Add the options used to pick and seed a generator"""
    func = click.option(
        "--generator",
        type=click.Choice(GENERATORS, case_sensitive=False),
        default="pcg32",
        help="Kind of generator to use",
    )(func)
    func = click.option(
        "--init-state",
        type=int,
        default=42,
        help="Initial seed for the random number generator (positive number).",
    )(func)
    func = click.option(
        "--init-seq",
        type=int,
        default=54,
        help="Identifier of the sequence produced by the random number generator (positive number).",
    )(func)
    return func


def print_numbers(numbers, output_bits: int, hexadecimal: bool):
    digits = output_bits // 4
    for value in numbers:
        if hexadecimal:
            print(f"0x{value:0{digits}x}")
        else:
            print(value)


@click.command("generate")
@seed_options
@click.option("--count", "-n", type=int, default=10, help="Number of random numbers to print")
@click.option("--hex", "hexadecimal", is_flag=True, default=False, help="Print numbers in hexadecimal form")
def generate(generator, init_state, init_seq, count, hexadecimal):
    """Print the raw output of a generator"""
    config = preset(generator)
    rng = PcgEngine(config, Seed(state=init_state, sequence=init_seq))
    print_numbers(islice(rng, count), config.output_bits, hexadecimal)


@click.command("save")
@seed_options
@click.option("--skip", type=int, default=0, help="Number of outputs to draw before saving the generator")
@click.argument("output_file_name", type=str)
def save(generator, init_state, init_seq, skip, output_file_name):
    """Seed a generator and save its state into a file"""
    config = preset(generator)
    rng = PcgEngine(config, Seed(state=init_state, sequence=init_seq))
    for _ in range(skip):
        rng.random()

    try:
        data = serialize(rng)
    except UnsupportedOperationError as e:
        print(f"error, {e}")
        sys.exit(1)

    with open(output_file_name, "wb") as outf:
        outf.write(data)

    print(f"Generator {config.name} written to {output_file_name} ({len(data)} bytes)")


@click.command("load")
@click.option(
    "--generator",
    type=click.Choice(GENERATORS, case_sensitive=False),
    default="pcg32",
    help="Kind of generator stored in the file",
)
@click.option("--count", "-n", type=int, default=10, help="Number of random numbers to print")
@click.option("--hex", "hexadecimal", is_flag=True, default=False, help="Print numbers in hexadecimal form")
@click.argument("input_file_name", type=str)
def load(generator, count, hexadecimal, input_file_name):
    """Resume a generator saved with the «save» command"""
    config = preset(generator)
    with open(input_file_name, "rb") as inpf:
        data = inpf.read()

    try:
        rng = deserialize(data, config)
    except (CompatibilityError, InvalidPcgData, UnsupportedOperationError) as e:
        print(f"{input_file_name}: {e}")
        sys.exit(1)

    print_numbers(islice(rng, count), config.output_bits, hexadecimal)


@click.command("bitmap")
@seed_options
@click.option("--width", type=int, default=256, help="Width of the image to create")
@click.option("--height", type=int, default=256, help="Height of the image to create")
@click.argument("output_png_file_name", type=str)
def bitmap(generator, init_state, init_seq, width, height, output_png_file_name):
    """Draw the bits produced by a generator as a black and white PNG image

    Patterns in the image reveal structure in the output."""
    from PIL import Image

    config = preset(generator)
    rng = PcgEngine(config, Seed(state=init_state, sequence=init_seq))
    img = Image.new("L", (width, height))

    value, bits_left = 0, 0
    for y in range(height):
        for x in range(width):
            if bits_left == 0:
                value, bits_left = rng.random(), config.output_bits

            bits_left -= 1
            img.putpixel(xy=(x, y), value=255 if (value >> bits_left) & 1 else 0)

    with open(output_png_file_name, "wb") as outf:
        img.save(outf, "PNG")

    print(f"PNG image written to {output_png_file_name}")


cli.add_command(generate)
cli.add_command(save)
cli.add_command(load)
cli.add_command(bitmap)

if __name__ == "__main__":
    cli()
