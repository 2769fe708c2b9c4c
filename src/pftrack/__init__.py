"""
pftrack: visual object tracking with a histogram-driven particle filter.

pftrack estimates the time-varying position and scale of an object in a video stream. The
object is selected once, as a rectangle in the first frame, and from then on followed by a
cloud of weighted hypotheses (particles) that approximates the posterior distribution over
its state. The package is a research tool: it favours a transparent, reproducible estimator
over speed, and treats violated preconditions as bugs rather than recoverable conditions.

Core components of pftrack include:

1. **Generic particle filter**:
   A weighted particle set with a deterministic resampling scheme. Particles are visited
   from heavy to light and replicated round(w * N) times, and any shortfall is filled with
   copies of the heaviest particle, so the particle count stays constant and a dominant
   hypothesis is never lost to an unlucky draw (``pftrack.particlefilter``).

2. **Autoregressive motion model**:
   Every particle keeps a short history of positions and scales in a fixed-capacity ring
   buffer. The next state is predicted with a second-order autoregressive model,
   x[n] = 2 x[n-1] - x[n-2] + noise, i.e. constant-velocity extrapolation
   (``pftrack.autoregression``).

3. **Histogram observation model**:
   The intensities inside a particle's rectangle are binned into a normalized histogram
   and compared to the histogram of the selected object with the squared-Hellinger
   distance d, giving the weight exp(-20 d) (``pftrack.histogram``, ``pftrack.metrics``,
   ``pftrack.tracker``).

4. **Information-theoretic sensor distance**:
   The same histogram engine computes joint frequencies between pixels over a series of
   frames, from which the Crutchfield distance d(X, Y) = H(X|Y) + H(Y|X) between every
   pair of pixels follows (``pftrack.crutchfield``).

---

**References**:

Crutchfield, J. P. (1990). *Information and its metric*. In Nonlinear Structures in Physical
Systems, 119-130. Springer.

Wang, Z., Yang, X., Xu, Y., & Yu, S. (2009). *CamShift guided particle filter for visual
tracking*. Pattern Recognition Letters, 30(4), 407-413.

Pérez, P., Hue, C., Vermaak, J., & Gangnet, M. (2002). *Color-based probabilistic tracking*.
In *Proceedings of the European Conference on Computer Vision (ECCV)*, 661-675.

"""
