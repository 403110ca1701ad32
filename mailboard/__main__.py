from mailboard import main

main()
