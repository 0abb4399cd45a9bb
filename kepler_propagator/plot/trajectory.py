import matplotlib.pyplot as plt
import numpy             as np

from pathlib           import Path
from typing            import Optional
from matplotlib.figure import Figure
from matplotlib.lines  import Line2D

from kepler_propagator.model.constants    import CONVERTER, SOLARSYSTEMCONSTANTS
from kepler_propagator.plot.utility       import add_stats, get_equal_limits
from kepler_propagator.validation.metrics import compute_angular_momentum_drift, compute_energy_drift


def _central_body_radii(
  name : str,
) -> Optional[tuple[float, float]]:
  body_constants = getattr(SOLARSYSTEMCONSTANTS, name.upper(), None)
  radius         = getattr(body_constants, 'RADIUS', None)
  if radius is None:
    return None
  return radius.EQUATOR, radius.POLAR


def plot_3d_trajectories(
  result : dict,
) -> Figure:
  """
  Plot 3D position and velocity trajectories in a 1x2 grid.

  Input:
  ------
    result : dict
      Propagation result dictionary containing 'time', 'state' (6xN array)
      and 'central_body'.

  Output:
  -------
    matplotlib.figure.Figure
      Figure object containing the 3D plots.
  """
  fig = plt.figure(figsize=(18,10))

  # Extract state vectors
  states = result['state']
  pos_x, pos_y, pos_z = states[0, :], states[1, :], states[2, :]
  vel_x, vel_y, vel_z = states[3, :], states[4, :], states[5, :]

  central_body = result['central_body']
  info_text    = f"Central Body: {central_body.name}  |  Samples: {len(result['time'])}  |  Span: {result['time'][0]:.1f} s to {result['time'][-1]:.1f} s"

  # Plot 3D position trajectory
  ax1 = fig.add_subplot(121, projection='3d')

  # Add central body ellipsoid where its radii are known
  radii = _central_body_radii(central_body.name)
  if radii is not None:
    r_eq, r_pol = radii
    u           = np.linspace(0, 2 * np.pi, 50)
    v           = np.linspace(0, np.pi, 50)
    x_body      = r_eq * np.outer(np.cos(u), np.sin(v))
    y_body      = r_eq * np.outer(np.sin(u), np.sin(v))
    z_body      = r_pol * np.outer(np.ones(np.size(u)), np.cos(v))
    ax1.plot_surface(x_body, y_body, z_body, color='lightblue', alpha=0.3, edgecolor='none') # type: ignore

  ax1.plot(pos_x, pos_y, pos_z, 'b.-', linewidth=1)
  ax1.scatter([pos_x[0]], [pos_y[0]], [pos_z[0]], s=100, marker='>', facecolors='white', edgecolors='b', linewidths=2) # type: ignore
  ax1.scatter([pos_x[-1]], [pos_y[-1]], [pos_z[-1]], s=100, marker='s', facecolors='white', edgecolors='b', linewidths=2) # type: ignore
  ax1.set_xlabel('Pos-X [m]')
  ax1.set_ylabel('Pos-Y [m]')
  ax1.set_zlabel('Pos-Z [m]') # type: ignore
  ax1.grid(True)
  ax1.set_box_aspect([1,1,1]) # type: ignore
  min_limit, max_limit = get_equal_limits(ax1, min_half_range=radii[0] if radii is not None else 0.0)
  ax1.set_xlim([min_limit, max_limit]) # type: ignore
  ax1.set_ylim([min_limit, max_limit]) # type: ignore
  ax1.set_zlim([min_limit, max_limit]) # type: ignore

  # Plot 3D velocity trajectory
  ax2 = fig.add_subplot(122, projection='3d')
  ax2.plot(vel_x, vel_y, vel_z, 'r.-', linewidth=1)
  ax2.scatter([vel_x[0]], [vel_y[0]], [vel_z[0]], s=100, marker='>', facecolors='white', edgecolors='r', linewidths=2) # type: ignore
  ax2.scatter([vel_x[-1]], [vel_y[-1]], [vel_z[-1]], s=100, marker='s', facecolors='white', edgecolors='r', linewidths=2) # type: ignore
  ax2.set_xlabel('Vel-X [m/s]')
  ax2.set_ylabel('Vel-Y [m/s]')
  ax2.set_zlabel('Vel-Z [m/s]') # type: ignore
  ax2.grid(True)
  ax2.set_box_aspect([1,1,1]) # type: ignore
  min_limit, max_limit = get_equal_limits(ax2)
  ax2.set_xlim([min_limit, max_limit]) # type: ignore
  ax2.set_ylim([min_limit, max_limit]) # type: ignore
  ax2.set_zlim([min_limit, max_limit]) # type: ignore

  # Legend handles with black edges
  legend_handles = [
    Line2D([0], [0], marker='>', color='w', markerfacecolor='white', markeredgecolor='black',
           markersize=10, markeredgewidth=2, linestyle='None', label='Start'),
    Line2D([0], [0], marker='s', color='w', markerfacecolor='white', markeredgecolor='black',
           markersize=10, markeredgewidth=2, linestyle='None', label='End'),
  ]
  fig.legend(handles=legend_handles, loc='upper right', fontsize=11, framealpha=0.9)

  fig.text(0.5, 0.02, info_text, ha='center', va='bottom', fontsize=11, color='black',
           bbox=dict(boxstyle='round,pad=0.5', facecolor='white', edgecolor='black', alpha=0.9))

  plt.tight_layout(rect=[0, 0.06, 1, 0.95])
  return fig


def plot_time_series(
  result : dict,
) -> Figure:
  """
  Plot position and velocity components, orbital elements and two-body
  invariant drift vs time.

  Input:
  ------
    result : dict
      Propagation result dictionary containing 'time', 'state', 'coe' and
      'central_body'.

  Output:
  -------
    matplotlib.figure.Figure
      Figure object containing the time series plots.
  """
  fig = plt.figure(figsize=(18,10))

  time   = result['time']
  states = result['state']
  coe    = result['coe']
  gp     = result['central_body'].gp

  pos_mag = np.linalg.norm(states[0:3, :], axis=0)
  vel_mag = np.linalg.norm(states[3:6, :], axis=0)

  # Position vs time (rows 0-2, column 0)
  ax_pos = plt.subplot2grid((6, 2), (0, 0), rowspan=3)
  ax_pos.plot(time, states[0, :], 'r.-', label='X', linewidth=1.5)
  ax_pos.plot(time, states[1, :], 'g.-', label='Y', linewidth=1.5)
  ax_pos.plot(time, states[2, :], 'b.-', label='Z', linewidth=1.5)
  ax_pos.plot(time, pos_mag, 'k.-', label='Magnitude', linewidth=2)
  ax_pos.tick_params(labelbottom=False)
  ax_pos.set_ylabel('Position\n[m]')
  ax_pos.legend()
  ax_pos.grid(True)
  ax_pos.ticklabel_format(style='scientific', axis='y', scilimits=(0,0))

  # Velocity vs time (rows 3-5, column 0)
  ax_vel = plt.subplot2grid((6, 2), (3, 0), rowspan=3, sharex=ax_pos)
  ax_vel.plot(time, states[3, :], 'r.-', label='X', linewidth=1.5)
  ax_vel.plot(time, states[4, :], 'g.-', label='Y', linewidth=1.5)
  ax_vel.plot(time, states[5, :], 'b.-', label='Z', linewidth=1.5)
  ax_vel.plot(time, vel_mag, 'k.-', label='Magnitude', linewidth=2)
  ax_vel.set_xlabel('Time\n[s]')
  ax_vel.set_ylabel('Velocity\n[m/s]')
  ax_vel.legend()
  ax_vel.grid(True)
  ax_vel.ticklabel_format(style='scientific', axis='y', scilimits=(0,0))

  # sma and ecc (rows 0-1, column 1)
  ax_sma = plt.subplot2grid((6, 2), (0, 1), sharex=ax_pos)
  ax_sma.plot(time, coe['sma'], 'b.-', linewidth=1.5)
  ax_sma.tick_params(labelbottom=False)
  ax_sma.set_ylabel('Semi-Major Axis\n[m]')
  ax_sma.grid(True)
  ax_sma.ticklabel_format(style='scientific', axis='y', scilimits=(0,0), useOffset=False)

  ax_ecc = plt.subplot2grid((6, 2), (1, 1), sharex=ax_pos)
  ax_ecc.plot(time, coe['ecc'], 'b.-', linewidth=1.5)
  ax_ecc.tick_params(labelbottom=False)
  ax_ecc.set_ylabel('Eccentricity\n[-]')
  ax_ecc.grid(True)

  # Angles (row 2, column 1)
  ax_ang = plt.subplot2grid((6, 2), (2, 1), sharex=ax_pos)
  ax_ang.plot(time, coe['inc' ] * CONVERTER.DEG_PER_RAD, 'r.-', label='INC',  linewidth=1.5)
  ax_ang.plot(time, coe['raan'] * CONVERTER.DEG_PER_RAD, 'g.-', label='RAAN', linewidth=1.5)
  ax_ang.plot(time, coe['aop' ] * CONVERTER.DEG_PER_RAD, 'b.-', label='AOP',  linewidth=1.5)
  ax_ang.tick_params(labelbottom=False)
  ax_ang.set_ylabel('Angle\n[deg]')
  ax_ang.legend(fontsize=8)
  ax_ang.grid(True)

  # Anomalies (row 3, column 1)
  ax_anom = plt.subplot2grid((6, 2), (3, 1), sharex=ax_pos)
  ax_anom.plot(time, coe['ta'] * CONVERTER.DEG_PER_RAD, 'r.-', label='TA', linewidth=1.5)
  ax_anom.plot(time, coe['ma'] * CONVERTER.DEG_PER_RAD, 'b.-', label='MA', linewidth=1.5)
  ax_anom.tick_params(labelbottom=False)
  ax_anom.set_ylabel('Anomaly\n[deg]')
  ax_anom.legend(fontsize=8)
  ax_anom.grid(True)

  # Energy drift (row 4, column 1)
  energy_drift = compute_energy_drift(states, gp)
  ax_energy    = plt.subplot2grid((6, 2), (4, 1), sharex=ax_pos)
  ax_energy.plot(time, energy_drift, 'k.-', linewidth=1.5)
  ax_energy.tick_params(labelbottom=False)
  ax_energy.set_ylabel('Energy Drift\n[m²/s²]')
  ax_energy.grid(True)
  add_stats(ax_energy, energy_drift, 'dE', 'm²/s²')

  # Angular momentum drift (row 5, column 1)
  ang_mom_drift = compute_angular_momentum_drift(states)
  ax_ang_mom    = plt.subplot2grid((6, 2), (5, 1), sharex=ax_pos)
  ax_ang_mom.plot(time, ang_mom_drift, 'k.-', linewidth=1.5)
  ax_ang_mom.set_xlabel('Time\n[s]')
  ax_ang_mom.set_ylabel('|dH|\n[m²/s]')
  ax_ang_mom.grid(True)
  add_stats(ax_ang_mom, ang_mom_drift, 'dH', 'm²/s')

  fig.align_ylabels([ax_sma, ax_ecc, ax_ang, ax_anom, ax_energy, ax_ang_mom])
  fig.align_ylabels([ax_pos, ax_vel])

  plt.subplots_adjust(hspace=0.17, wspace=0.2)
  return fig


def plot_comparison_error(
  comparison : dict,
  units      : str = 'm',
) -> Figure:
  """
  Plot position and velocity differences against a benchmark vs time.
  """
  fig = plt.figure(figsize=(18,10))

  time    = comparison['epochs']
  pos_err = comparison['pos_error']
  vel_err = comparison['vel_error']

  ax_pos = fig.add_subplot(311)
  ax_pos.plot(time, pos_err[0, :], 'r.-', label='X')
  ax_pos.plot(time, pos_err[1, :], 'g.-', label='Y')
  ax_pos.plot(time, pos_err[2, :], 'b.-', label='Z')
  ax_pos.tick_params(labelbottom=False)
  ax_pos.set_ylabel(f'Position Error\n[{units}]')
  ax_pos.legend()
  ax_pos.grid(True)
  add_stats(ax_pos, np.linalg.norm(pos_err, axis=0), 'dPos', units)

  ax_vel = fig.add_subplot(312, sharex=ax_pos)
  ax_vel.plot(time, vel_err[0, :], 'r.-', label='X')
  ax_vel.plot(time, vel_err[1, :], 'g.-', label='Y')
  ax_vel.plot(time, vel_err[2, :], 'b.-', label='Z')
  ax_vel.tick_params(labelbottom=False)
  ax_vel.set_ylabel(f'Velocity Error\n[{units}/s]')
  ax_vel.legend()
  ax_vel.grid(True)
  add_stats(ax_vel, np.linalg.norm(vel_err, axis=0), 'dVel', f'{units}/s')

  ax_sum = fig.add_subplot(313, sharex=ax_pos)
  ax_sum.semilogy(time, np.maximum(comparison['sum_abs_diff'], np.finfo(float).tiny), 'k.-', label='Sum |Diff|')
  ax_sum.axhline(comparison['tolerance'], color='r', linestyle='--', label='Tolerance')
  ax_sum.set_xlabel('Time\n[s]')
  ax_sum.set_ylabel(f'Sum |Diff|\n[{units}]')
  ax_sum.legend()
  ax_sum.grid(True)

  fig.align_ylabels([ax_pos, ax_vel, ax_sum])
  plt.subplots_adjust(hspace=0.17)
  return fig


def generate_plots(
  result             : dict,
  figures_folderpath : Path,
  object_name        : str            = "object",
  comparison         : Optional[dict] = None,
  comparison_units   : str            = 'm',
) -> list[Path]:
  """
  Generate and save all plots of a propagation result.

  Input:
  ------
    result : dict
      Propagation result from build_result.
    figures_folderpath : Path
      Directory to save plots.
    object_name : str
      Name of the object for plot titles and filenames.
    comparison : dict | None
      Benchmark comparison from compare_histories.
    comparison_units : str
      Length unit of the comparison.

  Output:
  -------
    filepaths : list[Path]
      Saved figure files.
  """

  figures_folderpath = Path(figures_folderpath)
  figures_folderpath.mkdir(parents=True, exist_ok=True)
  name_lower = object_name.lower().replace(' ', '_')
  filepaths  = []

  print("\nGenerate and Save Plots")
  print(f"  Figure Folderpath : {figures_folderpath}")
  print(f"    {object_name}")

  fig_3d = plot_3d_trajectories(result)
  fig_3d.suptitle(f'{object_name} Orbit - Kepler Propagation - 3D', fontsize=16)
  filepaths.append(figures_folderpath / f'3d_{name_lower}.png')
  fig_3d.savefig(filepaths[-1], dpi=300, bbox_inches='tight')
  plt.close(fig_3d)
  print(f"      3D          : <figures_folderpath>/3d_{name_lower}.png")

  fig_ts = plot_time_series(result)
  fig_ts.suptitle(f'{object_name} Orbit - Kepler Propagation - Time Series', fontsize=16)
  filepaths.append(figures_folderpath / f'timeseries_{name_lower}.png')
  fig_ts.savefig(filepaths[-1], dpi=300, bbox_inches='tight')
  plt.close(fig_ts)
  print(f"      Time Series : <figures_folderpath>/timeseries_{name_lower}.png")

  if comparison is not None and len(comparison['epochs']) > 0:
    fig_err = plot_comparison_error(comparison, comparison_units)
    fig_err.suptitle(f'{object_name} Orbit - Kepler Propagation vs Benchmark', fontsize=16)
    filepaths.append(figures_folderpath / f'error_{name_lower}_benchmark.png')
    fig_err.savefig(filepaths[-1], dpi=300, bbox_inches='tight')
    plt.close(fig_err)
    print(f"      Error       : <figures_folderpath>/error_{name_lower}_benchmark.png")

  return filepaths
