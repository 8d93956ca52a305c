import sys
import time
import click
from pathlib import Path
from .config import Config, DEFAULT_WINDOW_SIZE
from .exceptions import FastIBSError
from .utils.logging_utils import *
from .utils.file_utils import log_thread_info
from .kmer.database import open_for_random_access, index_info, log_index_info
from .kmer.comparison import process_reference
from .kmer.mapping import produce_mapping
from .kmer.intersect import intersect_indexes


logger = get_logger(__name__)

LOG_NAME = "fastibs.log"


def describe_command(ctx: click.Context) -> str:
    """The invoked subcommand with each option as the user spelled it."""
    lines = [f"  {ctx.command_path}"]
    for param in ctx.command.params:
        value = ctx.params.get(param.name)
        if value is not None:
            lines.append(f"    {param.opts[0]:<15} {value}")
    return "\n".join(lines)


def load_index(index_path: str):
    start = time.time()
    logger.info(f"Loading k-mer index from {index_path}")
    index = open_for_random_access(index_path)
    logger.info(f"Index loaded in {time.time() - start:.2f} seconds")
    return index


@click.group()
@click.version_option(package_name="fastibs")
def cli():
    """Windowed k-mer (IBS) distance between a k-mer index and reference sequences."""
    pass

@cli.command("stats")
@click.option('--index', 'index_path', required=True, help='K-mer index (k-mer dump, optionally gzipped)')
@click.option('--ref', required=True, help='Reference FASTA/FASTQ file, optionally gzipped')
@click.option('--out', required=True, help='Output TSV file')
@click.option('--window-size', default=DEFAULT_WINDOW_SIZE, type=click.IntRange(min=1), show_default=True,
              help='Length of the sequence window; must exceed the k-mer length')
@click.option('--threads', default=None, type=click.IntRange(min=1), help='Number of threads [default: all cores]')
def stats(index_path: str, ref: str, out: str, window_size: int, threads):
    """Per-window k-mer distance statistics of a reference against an index."""
    setup_logging(Path(out).parent / LOG_NAME)
    try:
        logger.info(f"Command:\n{describe_command(click.get_current_context())}")
        start_time = time.time()
        config = Config(index_path=index_path, sequence_path=ref, output_path=out,
                        window_size=window_size, threads=threads)
        log_thread_info(config.threads)

        log_step("Step 1 Loading k-mer index")
        index = load_index(config.index_path)

        log_step("Step 2 Calculating window statistics")
        window_stats = process_reference(index, config.sequence_path, config.output_path,
                                         config.window_size, threads=config.threads)

        summary = {
            "K-mer length": f"{index.kmer_length}",
            "Index k-mers": f"{len(index):,}",
            "Windows": f"{len(window_stats):,}",
            "Windows with variations": f"{sum(1 for s in window_stats if s.variations):,}",
            "Output": config.output_path,
        }
        log_step("Summary")
        log_summary_block(start_time, summary)
        log_all_warnings_and_errors()
    except FastIBSError as e:
        logger.error(f"Error in stats: {str(e)}")
        raise click.Abort()


@cli.command("map")
@click.option('--index', 'index_path', required=True, help='K-mer index (k-mer dump, optionally gzipped)')
@click.option('--ref', required=True, help='Reference FASTA/FASTQ file, optionally gzipped')
@click.option('--out', required=True, help='Output coverage file')
@click.option('--threads', default=None, type=click.IntRange(min=1), help='Number of threads [default: all cores]')
def map_coverage(index_path: str, ref: str, out: str, threads):
    """Per-base coverage of each reference sequence by index k-mers."""
    setup_logging(Path(out).parent / LOG_NAME)
    try:
        logger.info(f"Command:\n{describe_command(click.get_current_context())}")
        start_time = time.time()
        config = Config(index_path=index_path, sequence_path=ref, output_path=out, threads=threads)
        log_thread_info(config.threads)

        log_step("Step 1 Loading k-mer index")
        index = load_index(config.index_path)

        log_step("Step 2 Calculating coverage")
        mappings = produce_mapping(index, config.sequence_path, config.output_path, threads=config.threads)

        summary = {
            "K-mer length": f"{index.kmer_length}",
            "Sequences": f"{len(mappings):,}",
            "Output": config.output_path,
        }
        log_step("Summary")
        log_summary_block(start_time, summary)
        log_all_warnings_and_errors()
    except FastIBSError as e:
        logger.error(f"Error in map: {str(e)}")
        raise click.Abort()


@cli.command("intersect")
@click.argument('index_a')
@click.argument('index_b')
def intersect(index_a: str, index_b: str):
    """Print the number of k-mers shared by two indexes."""
    # stdout carries only the count
    setup_logging(stream=sys.stderr)
    try:
        shared = intersect_indexes(index_a, index_b)
    except FastIBSError as e:
        logger.error(f"Error in intersect: {str(e)}")
        raise click.Abort()
    click.echo(shared)


@cli.command("info")
@click.option('--index', 'index_path', required=True, help='K-mer index (k-mer dump, optionally gzipped)')
def info(index_path: str):
    """Show k-mer length, size and k-mer count of an index."""
    setup_logging()
    try:
        log_index_info(index_info(index_path))
    except FastIBSError as e:
        logger.error(f"Error in info: {str(e)}")
        raise click.Abort()


if __name__ == '__main__':
    cli()
