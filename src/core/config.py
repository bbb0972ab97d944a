"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field


# Feed endpoints
P2P_WS_URL = "wss://api.p2pquake.net/v2/ws"
WOLFX_WS_URL = "wss://ws-api.wolfx.jp/jma_eew"
P2P_HISTORY_URL = "https://api.p2pquake.net/v2/history"


@dataclass
class ViewportConfig:
    """Viewport fitting configuration.

    Attributes:
        width: Drawing area width in pixels
        height: Drawing area height in pixels
        padding: Fraction of each side kept free around fitted points
        min_zoom: Lowest zoom a fit may produce
        max_zoom: Highest zoom a fit may produce (keeps neighbouring context)
        single_point_zoom: Zoom used when fitting a single point
        far_away_zoom: Zoom used for a lone point outside Japan
        transition_seconds: Duration of the smoothed transition to a new fit
    """
    width: float = 1280.0
    height: float = 800.0
    padding: float = 0.35
    min_zoom: float = 0.2
    max_zoom: float = 8.0
    single_point_zoom: float = 8.0
    far_away_zoom: float = 2.0
    transition_seconds: float = 1.2


@dataclass
class WaveConfig:
    """Wave propagation constants.

    Attributes:
        p_velocity_km_s: Primary wave velocity
        s_velocity_km_s: Secondary wave velocity
        km_per_degree: Kilometers per degree of arc
    """
    p_velocity_km_s: float = 6.5
    s_velocity_km_s: float = 3.5
    km_per_degree: float = 111.32


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        report_feed_url: WebSocket URL of the finalized-report feed
        eew_feed_url: WebSocket URL of the early-warning feed
        history_url: HTTP URL used to bootstrap the latest report
        bootstrap_history: Fetch the latest report at startup
        reconnect_delay_seconds: Fixed delay before reconnecting a feed
        inactivity_window_seconds: Silence tolerated before a non-final alert is cleared
        final_hold_seconds: How long a final alert stays visible without updates
        staleness_check_interval_seconds: How often staleness is evaluated
        frame_interval_seconds: Animation frame period
        auto_zoom: Refit the viewport when new data arrives
        viewport: Viewport fitting configuration
        waves: Wave propagation constants
    """
    report_feed_url: str = P2P_WS_URL
    eew_feed_url: str = WOLFX_WS_URL
    history_url: str = P2P_HISTORY_URL
    bootstrap_history: bool = True
    reconnect_delay_seconds: float = 5.0
    inactivity_window_seconds: float = 20.0
    final_hold_seconds: float = 60.0
    staleness_check_interval_seconds: float = 1.0
    frame_interval_seconds: float = 1 / 30
    auto_zoom: bool = True
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    waves: WaveConfig = field(default_factory=WaveConfig)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def _require_positive(value: float, field_name: str) -> list[ValidationError]:
    if value <= 0:
        return [ValidationError(
            field=field_name,
            message=f"Must be positive, got {value}",
        )]
    return []


def _validate_url(url: str, schemes: tuple[str, ...], field_name: str) -> list[ValidationError]:
    if not url or url.startswith("${"):
        return [ValidationError(
            field=field_name,
            message="URL not resolved (still contains placeholder)",
        )]
    if not url.startswith(schemes):
        return [ValidationError(
            field=field_name,
            message=f"URL must start with one of {', '.join(schemes)}: {url}",
        )]
    return []


def validate_viewport(viewport: ViewportConfig) -> list[ValidationError]:
    """Validate viewport fitting configuration.

    Pure function.
    """
    errors = []
    errors.extend(_require_positive(viewport.width, "viewport.width"))
    errors.extend(_require_positive(viewport.height, "viewport.height"))
    errors.extend(_require_positive(viewport.min_zoom, "viewport.min_zoom"))
    errors.extend(_require_positive(viewport.single_point_zoom, "viewport.single_point_zoom"))
    errors.extend(_require_positive(viewport.far_away_zoom, "viewport.far_away_zoom"))

    if not 0 <= viewport.padding < 0.5:
        errors.append(ValidationError(
            field="viewport.padding",
            message=f"Padding must be in [0, 0.5), got {viewport.padding}",
        ))

    if viewport.min_zoom > viewport.max_zoom:
        errors.append(ValidationError(
            field="viewport",
            message=f"min_zoom ({viewport.min_zoom}) > max_zoom ({viewport.max_zoom})",
        ))

    if viewport.single_point_zoom > viewport.max_zoom:
        errors.append(ValidationError(
            field="viewport.single_point_zoom",
            message=f"single_point_zoom ({viewport.single_point_zoom}) exceeds max_zoom ({viewport.max_zoom})",
            severity="warning",
        ))

    if viewport.transition_seconds < 0:
        errors.append(ValidationError(
            field="viewport.transition_seconds",
            message=f"Must not be negative, got {viewport.transition_seconds}",
        ))

    return errors


def validate_waves(waves: WaveConfig) -> list[ValidationError]:
    """Validate wave propagation constants.

    Pure function.
    """
    errors = []
    errors.extend(_require_positive(waves.p_velocity_km_s, "waves.p_velocity_km_s"))
    errors.extend(_require_positive(waves.s_velocity_km_s, "waves.s_velocity_km_s"))
    errors.extend(_require_positive(waves.km_per_degree, "waves.km_per_degree"))

    if waves.p_velocity_km_s <= waves.s_velocity_km_s:
        errors.append(ValidationError(
            field="waves",
            message=(
                f"p_velocity_km_s ({waves.p_velocity_km_s}) must exceed "
                f"s_velocity_km_s ({waves.s_velocity_km_s})"
            ),
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(_validate_url(config.report_feed_url, ("ws://", "wss://"), "report_feed_url"))
    errors.extend(_validate_url(config.eew_feed_url, ("ws://", "wss://"), "eew_feed_url"))
    if config.bootstrap_history:
        errors.extend(_validate_url(config.history_url, ("http://", "https://"), "history_url"))

    errors.extend(_require_positive(config.reconnect_delay_seconds, "reconnect_delay_seconds"))
    errors.extend(_require_positive(config.inactivity_window_seconds, "inactivity_window_seconds"))
    errors.extend(_require_positive(config.final_hold_seconds, "final_hold_seconds"))
    errors.extend(_require_positive(
        config.staleness_check_interval_seconds, "staleness_check_interval_seconds",
    ))
    errors.extend(_require_positive(config.frame_interval_seconds, "frame_interval_seconds"))

    if config.staleness_check_interval_seconds > config.inactivity_window_seconds:
        errors.append(ValidationError(
            field="staleness_check_interval_seconds",
            message="Staleness check interval is longer than the inactivity window",
            severity="warning",
        ))

    errors.extend(validate_viewport(config.viewport))
    errors.extend(validate_waves(config.waves))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
