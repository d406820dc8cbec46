"""
Visualization Engine
====================
Plots for trajectory tables:
  1. Drop below the sight line vs range
  2. Velocity and energy vs range
  3. G1 / G7 drag curves
  4. Air density vs altitude
  5. Dashboard with key metrics
  6. RK4 vs reference deviations
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec
from typing import Dict, List, Sequence
import os

from .atmosphere import density_profile
from .drag_model import ALL_CURVES
from .integrator import Sample
from .validation import ValidationResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}

CURVE_COLORS = {'G1': '#00d4ff', 'G7': '#ff6b35'}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax):
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])


def _finish(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def samples_to_arrays(samples: Sequence[Sample]) -> Dict[str, np.ndarray]:
    """Column arrays keyed by `Sample` field name."""
    fields = ('range_m', 'drop_m', 'tof_s', 'vel_ms', 'energy_j', 'moa', 'mil', 'mach')
    return {f: np.array([getattr(s, f) for s in samples]) for f in fields}


# ══════════════════════════════════════════════════════════════════════════
#  1. Drop vs Range
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(samples: Sequence[Sample], zero_range_m: float = None,
                    title: str = 'Trajectory', save_path: str = None) -> plt.Figure:
    """Drop relative to the sight line (cm) vs range."""
    data = samples_to_arrays(samples)
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    ax.plot(data['range_m'], data['drop_m'] * 100,
            color=STYLE['accent_colors'][0], linewidth=2.5, label='Drop')
    ax.axhline(y=0, color='#888', linestyle='--', alpha=0.6, label='Line of sight')
    if zero_range_m:
        ax.axvline(x=zero_range_m, color='#00e676', linestyle=':', alpha=0.8,
                   label=f'Zero {zero_range_m:.0f} m')

    ax.set_xlabel('Range (m)', fontsize=12)
    ax.set_ylabel('Drop (cm)', fontsize=12)
    ax.set_title(title, fontsize=13, fontweight='bold')
    _legend(ax)
    ax.set_xlim(left=0)

    plt.tight_layout()
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  2. Velocity & Energy
# ══════════════════════════════════════════════════════════════════════════

def plot_velocity_energy(samples: Sequence[Sample], save_path: str = None) -> plt.Figure:
    """Remaining velocity and energy vs range, side by side."""
    data = samples_to_arrays(samples)
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    _apply_dark_style(fig, axes)

    axes[0].plot(data['range_m'], data['vel_ms'], color='#ff6b35', linewidth=2)
    axes[0].set_xlabel('Range (m)')
    axes[0].set_ylabel('Velocity (m/s)')
    axes[0].set_title('VELOCITY', fontweight='bold')

    axes[1].plot(data['range_m'], data['energy_j'], color='#ffeb3b', linewidth=2)
    axes[1].fill_between(data['range_m'], 0, data['energy_j'], alpha=0.1, color='#ffeb3b')
    axes[1].set_xlabel('Range (m)')
    axes[1].set_ylabel('Energy (J)')
    axes[1].set_title('ENERGY', fontweight='bold')

    plt.tight_layout()
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  3. Drag Curves
# ══════════════════════════════════════════════════════════════════════════

def plot_drag_curves(max_velocity: float = 1600.0, save_path: str = None) -> plt.Figure:
    """Drag index vs airspeed for the reference curves, including the
    scaled region above the last table point."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    v = np.linspace(0, max_velocity, 400)
    for model, curve in ALL_CURVES.items():
        color = CURVE_COLORS[model.value]
        ax.plot(v, curve.lookup_array(v), color=color, linewidth=2.5, label=curve.name)
        ax.plot(curve.velocity, curve.index, 'o', color=color, markersize=4)

    last_v = max(c.velocity[-1] for c in ALL_CURVES.values())
    ax.axvspan(last_v, max_velocity, alpha=0.08, color='#ff5252')
    ax.text((last_v + max_velocity) / 2, 0.2, 'Extrapolated', ha='center',
            color='#ff5252', fontsize=10, alpha=0.7)

    ax.set_xlabel('Airspeed (m/s)', fontsize=12)
    ax.set_ylabel('Drag index', fontsize=12)
    ax.set_title('Reference Drag Curves', fontsize=14, fontweight='bold')
    _legend(ax)
    ax.set_xlim(0, max_velocity)

    plt.tight_layout()
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  4. Air Density Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_density_profile(temperature_c: float = 15.0, save_path: str = None) -> plt.Figure:
    """Air density from sea level to 5 km, dry and saturated."""
    altitudes = np.linspace(0, 5000, 200)
    fig, ax = plt.subplots(figsize=(8, 7))
    _apply_dark_style(fig, ax)

    for rh, color in ((0.0, '#00e676'), (1.0, '#00d4ff')):
        profile = density_profile(altitudes, temperature_c, rh)
        ax.plot(profile['density'], altitudes, color=color, linewidth=2,
                label=f'RH {rh:.0%}')

    ax.set_xlabel('Density (kg/m³)', fontsize=12)
    ax.set_ylabel('Altitude (m)', fontsize=12)
    ax.set_title(f'Air Density at {temperature_c:.0f} °C', fontsize=14, fontweight='bold')
    _legend(ax)

    plt.tight_layout()
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  5. Dashboard
# ══════════════════════════════════════════════════════════════════════════

def plot_dashboard(samples: Sequence[Sample], title: str = 'Trajectory',
                   save_path: str = None) -> plt.Figure:
    """Drop, corrections, velocity and time of flight with a metrics panel."""
    data = samples_to_arrays(samples)
    rng = data['range_m']

    fig = plt.figure(figsize=(18, 10))
    fig.patch.set_facecolor(STYLE['bg_color'])
    gs = gridspec.GridSpec(2, 3, figure=fig, hspace=0.35, wspace=0.3)

    ax1 = fig.add_subplot(gs[0, :2])
    _apply_dark_style(fig, ax1)
    ax1.plot(rng, data['drop_m'] * 100, color='#00d4ff', linewidth=2.5)
    ax1.axhline(y=0, color='#888', linestyle='--', alpha=0.6)
    ax1.set_xlabel('Range (m)')
    ax1.set_ylabel('Drop (cm)')
    ax1.set_title('DROP', fontweight='bold', fontsize=13)

    ax_info = fig.add_subplot(gs[0, 2])
    ax_info.set_facecolor('#111111')
    ax_info.axis('off')
    metrics = [('SAMPLES', 'none')]
    if len(samples):
        last = samples[-1]
        metrics = [
            ('MUZZLE VEL', f'{samples[0].vel_ms:.0f} m/s'),
            ('MAX RANGE', f'{last.range_m:.0f} m'),
            ('DROP', f'{last.drop_m * 100:.1f} cm'),
            ('CORRECTION', f'{last.mil:.2f} mil / {last.moa:.1f} moa'),
            ('FLIGHT TIME', f'{last.tof_s:.3f} s'),
            ('REMAINING VEL', f'{last.vel_ms:.0f} m/s'),
            ('ENERGY', f'{last.energy_j:.0f} J'),
            ('MACH', f'{last.mach:.2f}'),
        ]
    for i, (label, value) in enumerate(metrics):
        y_pos = 0.92 - i * 0.115
        ax_info.text(0.05, y_pos, label, fontsize=10, fontweight='bold',
                     color='#888888', transform=ax_info.transAxes, fontfamily='monospace')
        ax_info.text(0.95, y_pos, value, fontsize=11, fontweight='bold',
                     color='#00d4ff', transform=ax_info.transAxes,
                     ha='right', fontfamily='monospace')
    ax_info.set_title('AT MAX RANGE', fontweight='bold',
                      color=STYLE['text_color'], fontsize=13, pad=10)

    ax2 = fig.add_subplot(gs[1, 0])
    _apply_dark_style(fig, ax2)
    ax2.plot(rng[1:], data['mil'][1:], color='#e040fb', linewidth=2)
    ax2.set_xlabel('Range (m)')
    ax2.set_ylabel('Correction (mil)')
    ax2.set_title('HOLD', fontweight='bold')

    ax3 = fig.add_subplot(gs[1, 1])
    _apply_dark_style(fig, ax3)
    ax3.plot(rng, data['vel_ms'], color='#ff6b35', linewidth=2)
    ax3.set_xlabel('Range (m)')
    ax3.set_ylabel('Velocity (m/s)')
    ax3.set_title('VELOCITY', fontweight='bold')

    ax4 = fig.add_subplot(gs[1, 2])
    _apply_dark_style(fig, ax4)
    ax4.plot(rng, data['tof_s'], color='#ffeb3b', linewidth=2)
    ax4.set_xlabel('Range (m)')
    ax4.set_ylabel('Time (s)')
    ax4.set_title('TIME OF FLIGHT', fontweight='bold')

    fig.suptitle(f'BALLISTIC DASHBOARD — {title}',
                 fontsize=16, fontweight='bold', color='#00d4ff', y=0.98)
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  6. Validation
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(results: List[ValidationResult], save_path: str = None) -> plt.Figure:
    """Drop and time-of-flight deviation of RK4 from the reference."""
    rng = np.array([r.range_m for r in results])
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    _apply_dark_style(fig, axes)

    axes[0].plot(rng, [r.drop_error * 1000 for r in results], color='#00d4ff', linewidth=2)
    axes[0].set_xlabel('Range (m)')
    axes[0].set_ylabel('Δ drop (mm)')
    axes[0].set_title('DROP ERROR', fontweight='bold')

    axes[1].plot(rng, [r.tof_error * 1000 for r in results], color='#ff6b35', linewidth=2)
    axes[1].set_xlabel('Range (m)')
    axes[1].set_ylabel('Δ time (ms)')
    axes[1].set_title('TIME OF FLIGHT ERROR', fontweight='bold')

    for ax in axes:
        ax.axhline(y=0, color='#555', linestyle='--', alpha=0.5)

    plt.tight_layout()
    return _finish(fig, save_path)
