"""Surface decoration pass for skylands-style voxel terrain."""
