"""Main application module for batch testing a published LUIS model.

This module provides the command line entry point: it converts every document
in a folder to text, runs the published model on each text chunk and writes
the prediction results as JSON files. A single text can also be predicted
directly with ``--text``.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from luis_predict.batch import ApplicationError, BatchRunStats, BatchTester
from luis_predict.config import ConfigError, ConfigValidator, Settings
from luis_predict.io import OutputError, OutputWriter
from luis_predict.prediction import PredictionClient, PredictionClientError, PredictionOptions


# ============================================================================
# Utility functions
# ============================================================================
def setup_logging(level: str = 'INFO') -> None:
    """Set up application logging.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    log_format = '%(asctime)s %(name)s [%(levelname)s]: %(message)s'
    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )

    logging.info('Logging configured (level=%s)', level)

    for logger_name in ['aiohttp', 'aiohttp.access', 'aiohttp.client']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def build_prediction_options(args: argparse.Namespace) -> PredictionOptions:
    """Build prediction options from command line flags."""
    return PredictionOptions(
        include_classifier_scores=not args.no_classifier_scores,
        include_verbose_extraction=not args.no_verbose_extraction,
        log_query=args.log_query,
    )


def apply_arguments_to_settings(args: argparse.Namespace) -> None:
    """Let command line values override the environment configuration."""
    if args.endpoint:
        Settings.LUIS_ENDPOINT_BASE_URI = args.endpoint
    if args.app_id:
        Settings.LUIS_APP_ID = args.app_id
    if args.slot:
        Settings.LUIS_MODEL_SLOT = args.slot
    if args.poll_interval is not None:
        Settings.LUIS_POLL_INTERVAL = str(args.poll_interval)


def validate_configuration(args: argparse.Namespace) -> None:
    """Validate application configuration.

    Raises:
        ApplicationError: If configuration is invalid.
    """
    try:
        ConfigValidator.validate_all(args.input_folder, require_input=args.text is None)
    except ConfigError as e:
        raise ApplicationError(f'Configuration validation failed: {e}') from e


def _get_example_text() -> str:
    """Get example text for argument parser epilog."""
    return """
Examples:
    # Convert and predict every file of a folder
    luis-batch-tester --input-folder test_files -l DEBUG

    # Query the staging slot without verbose extraction information
    luis-batch-tester --input-folder test_files --slot staging --no-verbose-extraction

    # Predict a single text and print the result
    luis-batch-tester --text "I'd like to repeat my takeout order from last weekend."
"""


def _add_io_arguments(parser: argparse.ArgumentParser) -> None:
    """Add input/output arguments to the parser."""
    parser.add_argument(
        '--input-folder',
        type=str,
        default=Settings.TEST_FILES_FOLDER,
        help='Folder containing the files to test'
    )

    parser.add_argument(
        '--output-folder',
        type=str,
        default=None,
        help='Folder for output files (default: OUTPUT_FOLDER or <input-folder>/output)'
    )

    parser.add_argument(
        '--output-stats',
        type=str,
        default=Settings.OUTPUT_STATS_FILE,
        help='Output file for run statistics (JSON format)'
    )

    parser.add_argument(
        '--text',
        type=str,
        default=None,
        help='Predict this text only and print the result as JSON'
    )


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    """Add endpoint and model selection arguments to the parser."""
    parser.add_argument(
        '--endpoint',
        type=str,
        default=None,
        help='Base URI of the LUIS endpoint (default: LUIS_ENDPOINT_BASE_URI)'
    )

    parser.add_argument(
        '--app-id',
        type=str,
        default=None,
        help='App ID of the published model (default: LUIS_APP_ID)'
    )

    parser.add_argument(
        '--slot',
        type=str.lower,
        choices=['staging', 'production'],
        default=None,
        help='Publish slot of the model (default: LUIS_MODEL_SLOT)'
    )

    parser.add_argument(
        '--poll-interval',
        type=float,
        default=None,
        help='Seconds between operation status checks (default: LUIS_POLL_INTERVAL)'
    )


def _add_prediction_arguments(parser: argparse.ArgumentParser) -> None:
    """Add prediction option flags to the parser."""
    parser.add_argument(
        '--no-classifier-scores',
        action='store_true',
        help='Do not request classifier scores'
    )

    parser.add_argument(
        '--no-verbose-extraction',
        action='store_true',
        help='Do not request verbose extraction information (text positions)'
    )

    parser.add_argument(
        '--log-query',
        action='store_true',
        help='Allow the service to retain queries for future training'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        description='LUIS batch tester - convert documents and run a published LUIS model on them',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_get_example_text()
    )

    _add_io_arguments(parser)
    _add_model_arguments(parser)
    _add_prediction_arguments(parser)

    parser.add_argument(
        '--log-level', '-l',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Set logging level (default: INFO)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate configuration and inputs without processing'
    )

    return parser


def create_client() -> PredictionClient:
    """Create a prediction client from the validated settings."""
    return PredictionClient(
        Settings.LUIS_ENDPOINT_BASE_URI,
        Settings.LUIS_PREDICTION_KEY,
        poll_interval=Settings.poll_interval(),
    )


async def run_single_prediction(args: argparse.Namespace) -> int:
    """Predict the text given on the command line and print the result.

    Returns:
        Exit code (0 for success).
    """
    async with create_client() as client:
        result = await client.predict(
            args.text,
            Settings.LUIS_APP_ID,
            Settings.LUIS_MODEL_SLOT,
            build_prediction_options(args),
        )
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


async def run_batch(args: argparse.Namespace) -> BatchRunStats:
    """Run the batch tester over the input folder.

    Returns:
        Statistics of the run.
    """
    output_folder = Path(args.output_folder) if args.output_folder else Settings.output_folder_for(args.input_folder)
    writer = OutputWriter()

    async with create_client() as client:
        tester = BatchTester(
            client,
            Settings.LUIS_APP_ID,
            Settings.LUIS_MODEL_SLOT,
            input_folder=args.input_folder,
            output_folder=output_folder,
            options=build_prediction_options(args),
            writer=writer,
        )
        stats = await tester.run()

    if args.output_stats:
        try:
            writer.write_stats_output(args.output_stats, stats.to_dict())
        except OutputError as e:
            logging.warning('Failed to write run statistics: %s', e)

    print('\nOutputs written to:')
    print(f'  Results: {output_folder}')
    print(f'  Files processed: {stats.processed_files}/{stats.total_files}')
    return stats


# ------------------------------------------------------------------------------
# Main function
# ------------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    """Main application entry point.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        parser = create_argument_parser()
        args = parser.parse_args(argv)

        setup_logging(args.log_level)
        logging.info('LUIS batch tester started')

        apply_arguments_to_settings(args)
        validate_configuration(args)

        if args.dry_run:
            _print_dry_run_success()
            return 0

        if args.text is not None:
            return asyncio.run(run_single_prediction(args))

        asyncio.run(run_batch(args))
        return 0

    except KeyboardInterrupt:
        logging.error('Processing interrupted by user')
        return 1
    except ApplicationError as e:
        logging.error('Application error: %s', e)
        return 1
    except PredictionClientError as e:
        logging.error('Prediction failed: %s', e)
        return 1


def _print_dry_run_success() -> None:
    """Print success message for dry run."""
    success_messages = [
        '✓ Configuration validated successfully',
        '✓ Command line arguments validated',
        'Dry run completed successfully - no processing performed'
    ]
    print('\n'.join(success_messages))


if __name__ == "__main__":
    sys.exit(main())
