import matplotlib.pyplot as plt
import numpy as np
import os
from datetime import datetime
from typing import List, Optional, Sequence
from .constants import TransportMode
from .comparison import conventional_footprint
from .emission_factors import require_all_modes
from .models import RouteOption
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================

current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
report_directory = os.path.join(current_directory, 'reports')

MODE_COLORS = {
    TransportMode.CAR: '#D32F2F',
    TransportMode.PLANE: '#7B1FA2',
    TransportMode.BUS: '#F57C00',
    TransportMode.TRAIN: '#388E3C',
    TransportMode.METRO: '#0097A7',
    TransportMode.BIKE: '#81C784',
    TransportMode.WALK: '#AED581',
}

require_all_modes(MODE_COLORS, "MODE_COLORS")


class Visualizer:
    def __init__(self, mode: str = "batch_run", output_root: Optional[str] = None):
        """
        mode: sub-directory name for this kind of run ('batch_run' or 'single_run')
        output_root: base directory for charts (defaults to <project>/reports)
        """
        self.mode = mode
        self.output_root = output_root or report_directory
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Clean, publication-style defaults."""
        plt.rcParams.update(plt.rcParamsDefault)
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'DejaVu Sans'],
            'font.size': 11,
            'axes.titlesize': 15,
            'axes.titleweight': 'bold',
            'axes.labelsize': 12,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50',
            'axes.spines.top': False,
            'axes.spines.right': False,
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'axes.grid': True,
            'axes.axisbelow': True,
        })

        self.colors = {
            'actual': '#388E3C',
            'conventional': '#9E9E9E',
            'score_high': '#388E3C',
            'score_mid': '#FBC02D',
            'score_low': '#D32F2F',
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        """Create the directory for this session's plots."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.output_root, self.mode, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def _score_color(self, score: int) -> str:
        if score >= 70:
            return self.colors['score_high']
        if score >= 40:
            return self.colors['score_mid']
        return self.colors['score_low']

    def _save(self, fig, filename: str) -> str:
        filepath = self.get_save_path(filename)
        fig.savefig(filepath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved to: {filepath}")
        return filepath

    # ============================================================================
    # BATCH PLOTS
    # ============================================================================

    def plot_route_ranking(self, routes: Sequence[RouteOption]) -> Optional[str]:
        """Horizontal bars of sustainability score, best route on top."""
        if not routes:
            return None

        names = [r.name for r in routes][::-1]
        scores = [r.sustainability_score for r in routes][::-1]

        fig, ax = plt.subplots(figsize=(10, 0.6 * len(routes) + 2))
        y = np.arange(len(routes))
        bars = ax.barh(y, scores, color=[self._score_color(s) for s in scores], height=0.6)
        ax.set_yticks(y)
        ax.set_yticklabels(names)
        ax.set_xlim(0, 105)
        ax.set_xlabel("Sustainability Score (0-100)", fontweight='bold')
        ax.set_title("Route Ranking by Sustainability", loc='left', pad=15)
        ax.grid(True, axis='x')
        ax.grid(False, axis='y')

        for bar, score in zip(bars, scores):
            ax.text(bar.get_width() + 1, bar.get_y() + bar.get_height() / 2, f"{score}",
                    va='center', fontweight='bold', color=self.colors['text'])

        plt.tight_layout()
        return self._save(fig, "route_ranking.png")

    def plot_footprint_comparison(self, routes: Sequence[RouteOption]) -> Optional[str]:
        """Grouped bars: route footprint vs driving the same distance."""
        if not routes:
            return None

        x = np.arange(len(routes))
        width = 0.38
        actual = [r.total_carbon_footprint for r in routes]
        conventional = [conventional_footprint(r.total_distance) for r in routes]

        fig, ax = plt.subplots(figsize=(max(8, 1.4 * len(routes) + 3), 6))
        ax.bar(x - width / 2, actual, width, label='Route', color=self.colors['actual'])
        ax.bar(x + width / 2, conventional, width, label='Private car', color=self.colors['conventional'])

        ax.set_xticks(x)
        ax.set_xticklabels([r.name for r in routes], rotation=30, ha='right')
        ax.set_ylabel("Emissions (kg CO2e)", fontweight='bold')
        ax.set_title("Route Footprint vs Driving", loc='left', pad=15)
        ax.legend(frameon=False)

        plt.tight_layout()
        return self._save(fig, "footprint_comparison.png")

    def plot_segment_breakdown(self, routes: Sequence[RouteOption]) -> Optional[str]:
        """Stacked bars of each route's emissions split by transport mode."""
        if not routes:
            return None

        modes = [m for m in TransportMode if any(m in r.modes for r in routes)]
        x = np.arange(len(routes))
        bottom = np.zeros(len(routes))

        fig, ax = plt.subplots(figsize=(max(8, 1.4 * len(routes) + 3), 6))
        for mode in modes:
            values = np.array([
                sum(s.carbon_emission for s in r.transport_modes if s.mode is mode) for r in routes
            ])
            ax.bar(x, values, 0.6, bottom=bottom, label=mode.value, color=MODE_COLORS[mode])
            bottom += values

        ax.set_xticks(x)
        ax.set_xticklabels([r.name for r in routes], rotation=30, ha='right')
        ax.set_ylabel("Emissions (kg CO2e)", fontweight='bold')
        ax.set_title("Emissions by Transport Mode", loc='left', pad=15)
        ax.legend(frameon=False, title="Mode")

        plt.tight_layout()
        return self._save(fig, "segment_breakdown.png")

    def generate_all_batch_plots(self, routes: Sequence[RouteOption]) -> List[str]:
        """Run every batch plot; a failing plot is logged and skipped."""
        paths = []
        for plot in (self.plot_route_ranking, self.plot_footprint_comparison, self.plot_segment_breakdown):
            try:
                path = plot(routes)
            except Exception as e:
                logger.error(f"Plot {plot.__name__} failed: {e}")
                plt.close('all')
                continue
            if path:
                paths.append(path)
        return paths
