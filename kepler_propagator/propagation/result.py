import numpy as np

from kepler_propagator.model.body            import CentralBody
from kepler_propagator.model.orbit_converter import OrbitConverter
from kepler_propagator.propagation.history   import PropagationHistory


def build_result(
  history      : PropagationHistory,
  central_body : CentralBody,
  name         : str = "object",
) -> dict:
  """
  Convert a propagation history into a result dictionary.

  Input:
  ------
    history : PropagationHistory
      Sampled history of one body.
    central_body : CentralBody
      Central body the history was propagated around.
    name : str
      Body name.

  Output:
  -------
    result : dict
      success : bool
      message : str
      name : str
      central_body : CentralBody
      time : np.ndarray
        Epochs [s], shape (N,).
      state : np.ndarray
        Cartesian states [m, m/s], shape (6, N).
      coe : dict[str, np.ndarray]
        sma, ecc, inc, raan, aop, ta and ma at each sample, shape (N,).
  """
  time, state = history.to_arrays()
  num_samples = len(time)

  coe = {key: np.zeros(num_samples) for key in ('sma', 'ecc', 'inc', 'raan', 'aop', 'ta', 'ma')}
  for idx, sample in enumerate(history.states):
    elements = OrbitConverter.to_keplerian(sample, central_body.gp)
    coe['sma' ][idx] = elements.sma
    coe['ecc' ][idx] = elements.ecc
    coe['inc' ][idx] = elements.inc
    coe['raan'][idx] = elements.raan
    coe['aop' ][idx] = elements.aop
    coe['ta'  ][idx] = elements.ta
    coe['ma'  ][idx] = OrbitConverter.ta_to_ma(elements.ta, elements.ecc)

  return {
    'success'      : True,
    'message'      : f"Propagated {num_samples} samples",
    'name'         : name,
    'central_body' : central_body,
    'time'         : time,
    'state'        : state,
    'coe'          : coe,
  }
