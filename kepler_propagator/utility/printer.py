import numpy as np

from kepler_propagator.model.constants     import CONVERTER
from kepler_propagator.propagation.history import PropagationHistory
from kepler_propagator.utility.time_helper import format_time_offset


def print_results_summary(
  result : dict,
) -> None:
  """
  Print the final Cartesian state and classical orbital elements of a
  propagation result.

  Input:
  ------
    result : dict
      Propagation result from build_result.
  """
  print("\nResults Summary")

  if not result.get('success'):
    print(f"  [ERROR] {result.get('message', 'Propagation failed')}")
    return

  # Final time
  time_f     = result['time'][-1]
  time_f_str = f"{format_time_offset(time_f)} ({time_f:.6f} s)"

  # Final position and velocity vectors
  pos_vec_f = result['state'][0:3, -1]
  vel_vec_f = result['state'][3:6, -1]

  # Final COEs
  sma  = result['coe']['sma' ][-1]
  ecc  = result['coe']['ecc' ][-1]
  inc  = result['coe']['inc' ][-1] * CONVERTER.DEG_PER_RAD
  raan = result['coe']['raan'][-1] * CONVERTER.DEG_PER_RAD
  aop  = result['coe']['aop' ][-1] * CONVERTER.DEG_PER_RAD
  ta   = result['coe']['ta'  ][-1] * CONVERTER.DEG_PER_RAD

  print(f"  Final State ({result.get('name', 'object')})")
  print(f"    Epoch        : {time_f_str}")
  print(f"    Central Body : {result['central_body'].name}")
  print(f"    Samples      : {len(result['time'])}")
  print(f"    Cartesian State")
  print(f"      Position : {pos_vec_f[0]:>19.12e}  {pos_vec_f[1]:>19.12e}  {pos_vec_f[2]:>19.12e} m")
  print(f"      Velocity : {vel_vec_f[0]:>19.12e}  {vel_vec_f[1]:>19.12e}  {vel_vec_f[2]:>19.12e} m/s")
  print(f"    Classical Orbital Elements")
  print(f"      SMA  : { sma:>19.12e} m")
  print(f"      ECC  : { ecc:>19.12e}")
  print(f"      INC  : { inc:>19.12e} deg")
  print(f"      RAAN : {raan:>19.12e} deg")
  print(f"      AOP  : { aop:>19.12e} deg")
  print(f"      TA   : {  ta:>19.12e} deg")


def print_history_table(
  history    : PropagationHistory,
  unit_per_m : float = 1.0,
  units      : str   = 'm',
) -> None:
  """
  Print every sample of a history, one row per epoch.

  Input:
  ------
    history : PropagationHistory
      History to print.
    unit_per_m : float
      Factor applied to the six state components.
    units : str
      Length unit label for the header.
  """
  print("\nPropagation History")
  header = (
    f"  {'Epoch [s]':>16}  "
    f"{'X [' + units + ']':>20}  {'Y [' + units + ']':>20}  {'Z [' + units + ']':>20}  "
    f"{'VX [' + units + '/s]':>20}  {'VY [' + units + '/s]':>20}  {'VZ [' + units + '/s]':>20}"
  )
  print(header)
  print("  " + "-" * (len(header) - 2))
  for epoch, state in history.items():
    values = state.state * unit_per_m
    print(f"  {epoch:>16.3f}  " + "  ".join(f"{value:>20.12e}" for value in values))


def print_comparison_summary(
  comparison : dict,
  units      : str = 'm',
) -> None:
  """
  Print the outcome of compare_histories.

  Input:
  ------
    comparison : dict
      Comparison result from compare_histories.
    units : str
      Length unit of the compared histories.
  """
  print("\nBenchmark Comparison")
  status = "PASS" if comparison['success'] else "FAIL"
  print(f"  Status              : {status}")
  print(f"  Message             : {comparison['message']}")
  print(f"  Compared Samples    : {len(comparison['epochs'])}")
  print(f"  Tolerance           : {comparison['tolerance']:.3e} {units}")
  print(f"  Max Sum |Diff|      : {comparison['max_sum_abs_diff']:.3e} {units}")

  if len(comparison['epochs']) > 0:
    pos_err_mag = np.linalg.norm(comparison['pos_error'], axis=0)
    print(f"  Max Position Error  : {np.max(pos_err_mag):.3e} {units}")

  if comparison['failed_epochs']:
    print(f"  [WARNING] Samples exceeding tolerance at epochs [s]: {comparison['failed_epochs']}")
  if comparison['missing_in_benchmark']:
    print(f"  [WARNING] Epochs missing in benchmark [s]: {comparison['missing_in_benchmark']}")
  if comparison['missing_in_history']:
    print(f"  [WARNING] Epochs missing in history [s]: {comparison['missing_in_history']}")
