"""
Real-versus-synthetic data reconciliation.

For each requested variable the reconciler tries the real provider once and
substitutes a synthesized series on any failure, so every requested variable
always gets an answer. Provenance is reported through status and source.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Dict, Iterable, Optional, Union

from ..algorithms import SeriesSynthesizer
from ..api import DataRodsAPI
from ..core import DateUtils, constants
from ..exceptions import NormalizationDegraded, UpstreamError, ValidationError
from ..logger import LoggerContext
from ..models import (
    BulkResponseEnvelope,
    ResultStatus,
    SeriesPoint,
    VariableKey,
    VariableSeriesResult,
    parse_variable,
)
from ..processing import ResponseNormalizer
from .validation import validate_coordinates, validate_variables


class DataReconciler:
    """Resolve variables against the real provider with synthetic fallback."""

    def __init__(
        self,
        upstream: Optional[DataRodsAPI] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        synthesizer: Optional[SeriesSynthesizer] = None,
        use_real_data: bool = True,
        max_workers: int = 8,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reconciler.

        Args:
            upstream: Data Rods client; without one every variable is synthesized
            normalizer: Payload normalizer
            synthesizer: Fallback series generator
            use_real_data: When False the upstream is never contacted
            max_workers: Upper bound on concurrent upstream fetches per bulk request
            logger: Logger instance
        """
        self.upstream = upstream
        self.normalizer = normalizer or ResponseNormalizer(logger)
        self.synthesizer = synthesizer or SeriesSynthesizer(logger=logger)
        self.use_real_data = use_real_data
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)
        self.date_utils = DateUtils(logger)

    @property
    def upstream_enabled(self) -> bool:
        return self.use_real_data and self.upstream is not None

    def resolve(
        self,
        variable: Union[str, VariableKey],
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date,
        response_format: str = constants.DEFAULT_FORMAT
    ) -> VariableSeriesResult:
        """
        Resolve one variable to a series with provenance.

        Never raises for upstream problems: unavailable, rejected or empty
        upstream data yields a 'fallback' result, and an unexpected failure
        yields an 'error' result; both carry a synthesized series.

        Args:
            variable: Variable key or parsed variable
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            start_date: First day of the series
            end_date: Last day of the series
            response_format: Format requested from the upstream

        Returns:
            VariableSeriesResult
        """
        parsed = parse_variable(variable)

        if not self.upstream_enabled:
            return self._synthetic_result(
                parsed, start_date, end_date, ResultStatus.FALLBACK, constants.SOURCE_MOCK_MODE
            )

        try:
            raw = self.upstream.fetch_variable(
                parsed, latitude, longitude, start_date, end_date, response_format
            )
            series = self.normalizer.normalize(raw, parsed.key)
            if not series:
                raise NormalizationDegraded("Upstream payload contained no usable data points")

        except UpstreamError as e:
            self.logger.warning(f"Failed to fetch {parsed.key}, using synthetic data: {e}")
            return self._synthetic_result(
                parsed, start_date, end_date, ResultStatus.FALLBACK, constants.SOURCE_FALLBACK,
                error=str(e)
            )

        except Exception as e:
            self.logger.error(f"Unexpected error resolving {parsed.key}: {e}", exc_info=True)
            return self._synthetic_result(
                parsed, start_date, end_date, ResultStatus.ERROR, constants.SOURCE_ERROR,
                error=str(e)
            )

        self.logger.info(f"Fetched {len(series)} points for {parsed.key} from upstream")
        return self._result(parsed, series, ResultStatus.SUCCESS, constants.SOURCE_UPSTREAM)

    def resolve_all(
        self,
        variables: Iterable[str],
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date
    ) -> BulkResponseEnvelope:
        """
        Resolve several variables concurrently and assemble one envelope.

        Every variable runs as its own task; all tasks are joined before the
        envelope is built, and a failing variable never affects its siblings.

        Args:
            variables: Variable keys (duplicates collapse to one entry)
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            start_date: First day of every series
            end_date: Last day of every series

        Returns:
            BulkResponseEnvelope with one result per distinct requested key

        Raises:
            ValidationError: If variables, coordinates or dates are malformed
        """
        keys = validate_variables(variables)
        latitude, longitude = validate_coordinates(latitude, longitude)
        if not isinstance(start_date, date) or not isinstance(end_date, date):
            raise ValidationError("startDate and endDate must be calendar dates")

        results: Dict[str, VariableSeriesResult] = {}

        with LoggerContext(self.logger, f"bulk fetch of {len(keys)} variables"):
            if keys:
                workers = min(self.max_workers, len(keys))
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolve") as executor:
                    futures = {
                        key: executor.submit(
                            self.resolve, key, latitude, longitude, start_date, end_date
                        )
                        for key in keys
                    }
                    # Joined in request order so the mapping order is deterministic
                    for key in keys:
                        results[key] = futures[key].result()

        return BulkResponseEnvelope(
            results=results,
            latitude=latitude,
            longitude=longitude,
            timestamp=self.date_utils.utc_timestamp(),
            source=constants.SOURCE_PROXY,
        )

    def _synthetic_result(
        self,
        variable: VariableKey,
        start_date: date,
        end_date: date,
        status: ResultStatus,
        source: str,
        error: Optional[str] = None
    ) -> VariableSeriesResult:
        series = self.synthesizer.synthesize(variable, start_date, end_date)
        return self._result(variable, series, status, source, error)

    @staticmethod
    def _result(
        variable: VariableKey,
        series: Iterable[SeriesPoint],
        status: ResultStatus,
        source: str,
        error: Optional[str] = None
    ) -> VariableSeriesResult:
        info = variable.info
        return VariableSeriesResult(
            variable=variable,
            series=tuple(series),
            source=source,
            status=status,
            unit=info.unit,
            description=info.description,
            error=error,
        )
