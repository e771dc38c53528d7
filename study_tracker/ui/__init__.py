from .main_window import MainWindow
from .dashboard_widget import DashboardWidget
from .insights_widget import InsightsWidget

__all__ = ["MainWindow", "DashboardWidget", "InsightsWidget"]
