"""Physical constants used when deriving fluid moments from SI inputs.

All values sourced from ``scipy.constants`` (CODATA 2018).
"""

import scipy.constants as _sc

# Masses
m_p = _sc.m_p                 # Proton mass [kg]

# Thermodynamic
k_B = _sc.k                   # Boltzmann constant [J/K]
