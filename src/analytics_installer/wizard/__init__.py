"""
Analytics Installer Wizard

Interactive wizard that prepares configuration and installs the services.
"""

from analytics_installer.wizard.machine import WizardMachine
from analytics_installer.wizard.orchestrator import WizardOrchestrator
from analytics_installer.wizard.ui import WizardUI

__all__ = ["WizardMachine", "WizardOrchestrator", "WizardUI"]
