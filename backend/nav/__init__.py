"""
Camera navigation for the map view.

`FlyAnimator` advances eased flights when ticked by the host frame loop;
`MapViewport` owns the view state and fans animator output out to listeners.
"""
