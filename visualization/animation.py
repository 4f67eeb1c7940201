"""
Animation Generation

Create GIF animations of a running solver. The solver is advanced
steps_per_frame times between rendered frames.
"""

import matplotlib
import matplotlib.pyplot as plt
import matplotlib.animation as animation
import numpy as np


class LBMAnimator:
    """
    Generate velocity-magnitude animations from a live solver.

    Parameters
    ----------
    solver : CylinderFlowSolver
        Solver to advance and draw
    output_path : str
        Target file (.gif)
    fps : int
        Frames per second of the output
    steps_per_frame : int
        Solver steps between frames
    """

    def __init__(self, solver, output_path, fps=20, steps_per_frame=20):
        self.solver = solver
        self.output_path = output_path
        self.fps = fps
        self.steps_per_frame = steps_per_frame

    def _frame(self):
        solver = self.solver
        field = solver.velocity_magnitudes().reshape(solver.height, solver.width)
        field = field.copy()
        field[solver.solid_mask] = np.nan
        return field

    def generate_animation(self, num_frames=100, vmax=None, verbose=True):
        """
        Run the solver and write the animation.

        Returns
        -------
        output_path : str
        """
        solver = self.solver
        fig, ax = plt.subplots(figsize=(12, 6))

        cmap = matplotlib.colormaps['viridis'].copy()
        cmap.set_bad(color='black')
        if vmax is None:
            vmax = 2.5 * max(abs(solver.u_inlet), float(np.nanmax(self._frame())))

        im = ax.imshow(self._frame(), origin='lower', cmap=cmap, aspect='equal',
                       vmin=0.0, vmax=vmax, extent=[0, solver.width, 0, solver.height])
        title = ax.set_title(f'Step {solver.step_count}')
        ax.set_xlabel('x')
        ax.set_ylabel('y')
        plt.colorbar(im, ax=ax, label='|u|', shrink=0.8)

        def animate(frame_idx):
            for _ in range(self.steps_per_frame):
                solver.step()
            im.set_array(self._frame())
            title.set_text(f'Step {solver.step_count}')
            if verbose and (frame_idx + 1) % 10 == 0:
                print(f"  Frame {frame_idx + 1}/{num_frames}")
            return [im, title]

        anim = animation.FuncAnimation(fig, animate, frames=num_frames,
                                       interval=1000 // self.fps, blit=False)
        anim.save(self.output_path, writer='pillow', fps=self.fps, dpi=100)
        plt.close(fig)

        if verbose:
            print(f"Saved: {self.output_path}")

        return self.output_path
