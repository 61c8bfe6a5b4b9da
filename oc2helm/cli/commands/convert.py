"""Convert command implementation."""

import logging
from argparse import Namespace
from pathlib import Path

from oc2helm.chart.emitter import ChartSettings
from oc2helm.diagnostics import Diagnostics
from oc2helm.exceptions import ParseError, TemplateValidationError, VariableMatchError
from oc2helm.transformer import TemplateTransformer


logger = logging.getLogger(__name__)


def configure_logging(args: Namespace) -> None:
    """Set up logging from the verbosity flags."""
    log_level = getattr(logging, args.log_level.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def convert_one(template_path: Path, settings: ChartSettings, use_overrides: bool) -> int:
    """
    Convert a single template file.

    Returns:
        0 on success, 1 for missing files and runtime errors, 2 for invalid templates
    """
    if not template_path.exists():
        logger.error(f"Template file not found: {template_path}")
        return 1

    try:
        transformer = TemplateTransformer.from_file(
            template_path, use_overrides=use_overrides, diagnostics=Diagnostics()
        )
        chart_dir = Path(settings.target_dir) / transformer.chart_name
        if chart_dir.exists():
            logger.warning(f"Chart directory '{chart_dir}' exists, generated files will be overwritten")

        chart_dir = transformer.run(settings)
    except TemplateValidationError as e:
        logger.error(str(e))
        return e.exit_code
    except ParseError as e:
        logger.error(str(e))
        return 2
    except ValueError as e:
        logger.error(str(e))
        return 1
    except VariableMatchError as e:
        logger.error(f"Substitution error in '{template_path}': {e}")
        return 1
    except OSError as e:
        logger.error(f"Failed to write chart for '{template_path}': {e}")
        return 1

    warnings = len(transformer.diagnostics.warnings)
    logger.info(f"Generated chart '{chart_dir}' ({warnings} warning(s))")
    return 0


def convert_templates(args: Namespace) -> int:
    """
    Convert every template named on the command line.

    Templates are processed one after another; the first failure stops the
    run unless --continue-on-error is given.
    """
    configure_logging(args)

    settings = ChartSettings(target_dir=Path(args.target_dir))
    exit_code = 0
    for template in args.templates:
        result = convert_one(Path(template), settings, use_overrides=not args.no_overrides)
        if result != 0:
            exit_code = exit_code or result
            if not args.continue_on_error:
                break
    return exit_code
