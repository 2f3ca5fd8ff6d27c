"""Layer file trees: building, stacking, comparing, rendering and scoring."""